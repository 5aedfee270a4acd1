"""
FastAPI dependencies that assemble services from the resources created at
startup (see ``csrms.main.lifespan``).
"""

from fastapi import Depends

from csrms.core.config import settings
from csrms.core.database import Database, get_database
from csrms.core.mail import SmtpMailer, get_mailer
from csrms.services.audit import AuditService
from csrms.services.requests import ServiceRequestService
from csrms.services.workflow import RequestWorkflow
from csrms.utils.notifications import NotificationService
from csrms.utils.uploads import ImageStore, get_image_store


def get_request_service(database: Database = Depends(get_database)) -> ServiceRequestService:
    return ServiceRequestService(database)


def get_audit_service(database: Database = Depends(get_database)) -> AuditService:
    return AuditService(database)


def get_notification_service(
    database: Database = Depends(get_database),
    mailer: SmtpMailer = Depends(get_mailer),
) -> NotificationService:
    return NotificationService(database, mailer)


def get_workflow(
    requests: ServiceRequestService = Depends(get_request_service),
    audit: AuditService = Depends(get_audit_service),
    notifier: NotificationService = Depends(get_notification_service),
    image_store: ImageStore = Depends(get_image_store),
) -> RequestWorkflow:
    return RequestWorkflow(
        requests=requests,
        audit=audit,
        notifier=notifier,
        image_store=image_store,
        staff_recipient_id=settings.STAFF_RECIPIENT_ID,
        max_image_bytes=settings.MAX_IMAGE_BYTES,
    )
