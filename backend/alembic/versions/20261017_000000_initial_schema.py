"""Create service request, user, audit and notification tables"""

revision = "20261017_000000"
down_revision = None
branch_labels = None
depends_on = None

from alembic import op
import sqlalchemy as sa


def upgrade():
    """Create the intake schema."""
    op.create_table(
        "users",
        sa.Column("user_id", sa.String, primary_key=True),
        sa.Column("email", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("full_name", sa.String(255)),
        sa.Column("role", sa.String(20), nullable=False, server_default="citizen", index=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_table(
        "citizens",
        sa.Column("user_id", sa.String, sa.ForeignKey("users.user_id"), primary_key=True),
        sa.Column("total_requests_resolved", sa.Integer, nullable=False, server_default="0"),
    )
    op.create_table(
        "service_requests",
        sa.Column("request_id", sa.String(11), primary_key=True),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("category", sa.String(50), nullable=False, index=True),
        sa.Column("status", sa.String(20), nullable=False, index=True),
        sa.Column("priority", sa.String(20), nullable=False),
        sa.Column("location", sa.Text, nullable=False),
        sa.Column("image_path", sa.String(255)),
        sa.Column("user_id", sa.String, nullable=False, index=True),
        sa.Column("submission_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("resolution_date", sa.DateTime(timezone=True)),
    )
    op.create_index(
        "idx_service_requests_user_submitted",
        "service_requests",
        ["user_id", "submission_date"],
    )
    op.create_table(
        "audit_logs",
        sa.Column("log_id", sa.String(11), primary_key=True),
        sa.Column("user_id", sa.String, nullable=False, index=True),
        sa.Column("action", sa.String(100), nullable=False, index=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False, index=True),
        sa.Column("details", sa.Text),
        sa.Column("ip_address", sa.String(45)),
    )
    op.create_index("idx_audit_logs_user_time", "audit_logs", ["user_id", "timestamp"])
    op.create_table(
        "notifications",
        sa.Column("notification_id", sa.String(11), primary_key=True),
        sa.Column("recipient_id", sa.String, nullable=False, index=True),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("sent_date", sa.DateTime(timezone=True), nullable=False, index=True),
        sa.Column("is_read", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("request_id", sa.String(11), index=True),
    )


def downgrade():
    """Drop the intake schema."""
    op.drop_table("notifications")
    op.drop_index("idx_audit_logs_user_time", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("idx_service_requests_user_submitted", table_name="service_requests")
    op.drop_table("service_requests")
    op.drop_table("citizens")
    op.drop_table("users")
