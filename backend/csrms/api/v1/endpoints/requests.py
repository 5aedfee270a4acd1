"""
Service request intake and tracking endpoints.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import JSONResponse

from csrms.api.deps import get_request_service, get_workflow
from csrms.core.config import settings
from csrms.core.logging import current_client_ip
from csrms.core.rate_limiter import limiter
from csrms.schemas.service_requests import (
    ServiceRequestRead,
    StatusUpdate,
    SubmissionSummary,
)
from csrms.services.requests import InvalidStatusError, ServiceRequestService
from csrms.services.validation import RequestSubmission
from csrms.services.workflow import RequestWorkflow, SubmissionFailed, SubmissionRejected
from csrms.utils.uploads import check_image_upload, read_image_upload

logger = logging.getLogger(__name__)

router = APIRouter()


def _internal_error(error: Optional[str] = None) -> JSONResponse:
    body = {"success": False, "message": "Internal server error"}
    if error is not None:
        body["error"] = error
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)


@router.post("/submit-request", status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.SUBMIT_RATE_LIMIT)
async def submit_service_request(
    request: Request,
    title: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    region: Optional[str] = Form(None),
    city: Optional[str] = Form(None),
    house_number: Optional[str] = Form(None, alias="houseNumber"),
    description: Optional[str] = Form(None),
    user_id: Optional[str] = Form(None, alias="userId"),
    image: Optional[UploadFile] = File(None),
    workflow: RequestWorkflow = Depends(get_workflow),
):
    """
    Submit a new service request (multipart form, optional ``image`` part).

    - 201: request stored, staff notified
    - 400: upload refused or validation failed (all errors listed)
    - 500: request could not be stored
    """
    upload = None
    if image is not None and image.filename:
        upload = await read_image_upload(image, settings.MAX_IMAGE_BYTES)
        upload_errors = check_image_upload(upload, settings.MAX_IMAGE_BYTES)
        if upload_errors:
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={
                    "success": False,
                    "message": "Invalid image upload",
                    "errors": upload_errors,
                },
            )

    submission = RequestSubmission(
        title=title,
        category=category,
        region=region,
        city=city,
        user_id=user_id,
        house_number=house_number,
        description=description,
    )

    try:
        record = await workflow.submit(submission, image=upload, ip_address=current_client_ip())
    except SubmissionRejected as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": "Validation failed", "errors": exc.errors},
        )
    except SubmissionFailed as exc:
        return _internal_error(str(exc))

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={
            "success": True,
            "message": "Service request submitted successfully",
            "data": SubmissionSummary.model_validate(record).to_json(),
        },
    )


@router.get("/request/{request_id}")
async def get_service_request(
    request_id: str,
    workflow: RequestWorkflow = Depends(get_workflow),
):
    """Get a service request by ID."""
    try:
        record = await workflow.get_service_request(request_id)
    except Exception:
        logger.exception("Error fetching service request %s", request_id)
        return _internal_error()

    if record is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "message": "Service request not found"},
        )
    return {"success": True, "data": ServiceRequestRead.model_validate(record).to_json()}


@router.get("/user/{user_id}/requests")
async def list_user_requests(
    user_id: str,
    service: ServiceRequestService = Depends(get_request_service),
):
    """List a citizen's service requests, newest first."""
    try:
        records = await service.get_requests_by_user(user_id)
    except Exception:
        logger.exception("Error fetching requests for user %s", user_id)
        return _internal_error()

    return {
        "success": True,
        "count": len(records),
        "data": [ServiceRequestRead.model_validate(r).to_json() for r in records],
    }


@router.patch("/request/{request_id}/status")
async def update_service_request_status(
    request_id: str,
    update: StatusUpdate,
    workflow: RequestWorkflow = Depends(get_workflow),
):
    """Move a request through its lifecycle (staff only)."""
    try:
        record = await workflow.update_status(
            request_id, update.status, update.user_id, ip_address=current_client_ip()
        )
    except InvalidStatusError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": str(exc)},
        )
    except Exception as exc:
        return _internal_error(str(exc))

    if record is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "message": "Service request not found"},
        )
    return {"success": True, "data": ServiceRequestRead.model_validate(record).to_json()}
