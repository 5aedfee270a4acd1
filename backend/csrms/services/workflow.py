"""
Request lifecycle workflow.

Submission runs validate -> persist -> audit -> notify, strictly in that
order: a request is durable before it is audited and announced. Only
validation and persistence can fail the submission; the audit entry and
the staff notification are best-effort.
"""
import logging
from typing import List, Optional

from csrms.core.metrics import record_submission
from csrms.models.audit import AuditAction
from csrms.models.notification import NotificationType
from csrms.models.service_request import ServiceRequest
from csrms.services.audit import AuditService
from csrms.services.requests import (
    InvalidStatusError,
    NewServiceRequest,
    ServiceRequestService,
)
from csrms.services.validation import (
    MAX_IMAGE_BYTES,
    RequestSubmission,
    is_valid_request_id,
    validate_request_data,
)
from csrms.utils.notifications import NotificationService
from csrms.utils.uploads import ImageStore, ImageUpload

logger = logging.getLogger(__name__)


class SubmissionRejected(Exception):
    """The submission failed validation; nothing was stored."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


class SubmissionFailed(Exception):
    """The submission was valid but could not be persisted."""


class RequestWorkflow:
    """Coordinates validation, persistence, audit and notification."""

    def __init__(
        self,
        requests: ServiceRequestService,
        audit: AuditService,
        notifier: NotificationService,
        image_store: ImageStore,
        staff_recipient_id: str,
        max_image_bytes: int = MAX_IMAGE_BYTES,
    ):
        self.requests = requests
        self.audit = audit
        self.notifier = notifier
        self.image_store = image_store
        self.staff_recipient_id = staff_recipient_id
        self.max_image_bytes = max_image_bytes

    async def submit(
        self,
        submission: RequestSubmission,
        image: Optional[ImageUpload] = None,
        ip_address: Optional[str] = None,
    ) -> ServiceRequest:
        """
        Accept a citizen submission.

        Raises:
            SubmissionRejected: validation failed
            SubmissionFailed: the request could not be stored
        """
        result = validate_request_data(submission, image, self.max_image_bytes)
        if not result.is_valid:
            logger.info("Rejected submission: %s", result.errors)
            raise SubmissionRejected(result.errors)

        try:
            image_path = await self.image_store.save(image) if image else None
            record = await self.requests.create_service_request(
                NewServiceRequest(
                    title=submission.title,
                    description=submission.description,
                    category=submission.category,
                    region=submission.region,
                    city=submission.city,
                    house_number=submission.house_number,
                    image_path=image_path,
                    user_id=submission.user_id,
                )
            )
        except Exception as exc:
            logger.exception("Error submitting service request")
            if submission.user_id:
                await self.audit.log_event(
                    user_id=submission.user_id,
                    action=AuditAction.SUBMIT_REQUEST_ERROR,
                    details=f"Error: {exc}",
                    ip_address=ip_address,
                )
            raise SubmissionFailed(str(exc)) from exc

        record_submission(record.category)

        await self.audit.log_event(
            user_id=submission.user_id,
            action=AuditAction.SUBMIT_REQUEST,
            details=f"Service request submitted: {record.title}",
            ip_address=ip_address,
        )
        await self.notifier.send_notification(
            recipient_id=self.staff_recipient_id,
            message=f"New service request submitted: {record.title}",
            notification_type=NotificationType.SYSTEM.value,
            request_id=record.request_id,
        )
        return record

    async def get_service_request(self, request_id: str) -> Optional[ServiceRequest]:
        """Look a request up; malformed IDs are treated as not found."""
        if not is_valid_request_id(request_id):
            return None
        return await self.requests.get_request_by_id(request_id)

    async def update_status(
        self,
        request_id: str,
        status: str,
        actor_id: str,
        ip_address: Optional[str] = None,
    ) -> Optional[ServiceRequest]:
        """
        Change a request's status, audit it and tell the owner.

        Returns None when the request does not exist.

        Raises:
            InvalidStatusError: ``status`` is not a lifecycle value
        """
        try:
            record = await self.requests.update_request_status(request_id, status, actor_id)
        except InvalidStatusError:
            raise
        except Exception as exc:
            logger.exception("Error updating status of %s", request_id)
            await self.audit.log_event(
                user_id=actor_id,
                action=AuditAction.UPDATE_REQUEST_STATUS_ERROR,
                details=f"Error: {exc}",
                ip_address=ip_address,
            )
            raise

        if record is None:
            return None

        await self.audit.log_event(
            user_id=actor_id,
            action=AuditAction.UPDATE_REQUEST_STATUS,
            details=f"Service request {request_id} status changed to {status}",
            ip_address=ip_address,
        )
        await self.notifier.send_notification(
            recipient_id=record.user_id,
            message=f"Your service request '{record.title}' is now {status}.",
            notification_type=NotificationType.EMAIL.value,
            request_id=record.request_id,
        )
        return record
