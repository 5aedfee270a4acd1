"""
Service request models and their fixed vocabularies.
"""
import enum

from sqlalchemy import Column, String, DateTime, Text, Index

from csrms.core.database import Base


class RequestCategory(str, enum.Enum):
    """Complaint categories accepted at intake."""
    WASTE_DISPOSAL = "Waste Disposal"
    BROKEN_STREETLIGHTS = "Broken Streetlights"
    WATER_PIPELINE_DISRUPTIONS = "Water Pipeline Disruptions"
    ROAD_MAINTENANCE = "Road Maintenance"


class RequestStatus(str, enum.Enum):
    """Request lifecycle: Pending -> In Progress -> Resolved/Closed."""
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    CLOSED = "Closed"


class RequestPriority(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


TERMINAL_STATUSES = frozenset({RequestStatus.RESOLVED.value, RequestStatus.CLOSED.value})


class ServiceRequest(Base):
    """
    Citizen complaint tracked through the status lifecycle.

    Rows are created by the submission workflow, mutated only by status
    updates and never deleted.
    """
    __tablename__ = "service_requests"

    request_id = Column(String(11), primary_key=True)

    # Request details
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String(50), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=RequestStatus.PENDING.value, index=True)
    priority = Column(String(20), nullable=False, default=RequestPriority.MEDIUM.value)

    # "<region>, <city>[, House: <number>]"
    location = Column(Text, nullable=False)
    image_path = Column(String(255))

    # Owner
    user_id = Column(String, nullable=False, index=True)

    # Dates
    submission_date = Column(DateTime(timezone=True), nullable=False)
    resolution_date = Column(DateTime(timezone=True))

    __table_args__ = (
        Index("idx_service_requests_user_submitted", "user_id", "submission_date"),
    )

    def __repr__(self) -> str:
        return f"<ServiceRequest(request_id={self.request_id}, status={self.status})>"
