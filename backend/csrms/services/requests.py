"""
Service request persistence.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select, update, func

from csrms.core.database import Database
from csrms.core.effects import best_effort
from csrms.models.service_request import (
    ServiceRequest,
    RequestPriority,
    RequestStatus,
    TERMINAL_STATUSES,
)
from csrms.models.user import Citizen
from csrms.services.validation import VALID_STATUSES, is_valid_status
from csrms.utils.identifiers import generate_request_id

logger = logging.getLogger(__name__)


class InvalidStatusError(ValueError):
    """Raised when a status outside the lifecycle vocabulary is requested."""

    def __init__(self, status: object):
        self.status = status
        super().__init__(
            f"Invalid status value: {status!r} (expected one of: {', '.join(VALID_STATUSES)})"
        )


@dataclass
class NewServiceRequest:
    """Fields needed to create a service request row."""

    title: str
    category: str
    region: str
    city: str
    user_id: str
    description: Optional[str] = None
    house_number: Optional[str] = None
    image_path: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    submission_date: Optional[datetime] = None


def build_location(region: str, city: str, house_number: Optional[str] = None) -> str:
    """Compose the stored location string from its parts."""
    location = f"{region}, {city}"
    if house_number:
        location += f", House: {house_number}"
    return location


class ServiceRequestService:
    """
    Reads and writes service requests.

    Each method opens its own session and commits on its own; a status
    update and the counter increment it triggers are two separate writes.
    """

    def __init__(self, database: Database):
        self.database = database

    async def create_service_request(self, data: NewServiceRequest) -> ServiceRequest:
        """Insert a new request with a fresh ID and return the stored row."""
        record = ServiceRequest(
            request_id=generate_request_id(),
            title=data.title,
            description=data.description or "",
            category=data.category,
            status=data.status or RequestStatus.PENDING.value,
            priority=data.priority or RequestPriority.MEDIUM.value,
            submission_date=data.submission_date or datetime.now(timezone.utc),
            location=build_location(data.region, data.city, data.house_number),
            image_path=data.image_path,
            user_id=data.user_id,
        )

        async with self.database.session() as session:
            session.add(record)
            await session.commit()
            await session.refresh(record)

        logger.info("Created service request %s", record.request_id)
        return record

    async def get_request_by_id(self, request_id: str) -> Optional[ServiceRequest]:
        """Return the request, or None when it does not exist."""
        stmt = select(ServiceRequest).where(ServiceRequest.request_id == request_id)
        async with self.database.session() as session:
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def get_requests_by_user(self, user_id: str) -> List[ServiceRequest]:
        """All requests owned by ``user_id``, newest submission first."""
        stmt = (
            select(ServiceRequest)
            .where(ServiceRequest.user_id == user_id)
            .order_by(ServiceRequest.submission_date.desc())
        )
        async with self.database.session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def update_request_status(
        self, request_id: str, status: str, user_id: str
    ) -> Optional[ServiceRequest]:
        """
        Move a request to ``status``.

        Args:
            request_id: Request to update
            status: New lifecycle status
            user_id: Staff member performing the update

        Returns:
            The updated request, or None if no such request exists.

        Raises:
            InvalidStatusError: ``status`` is not a lifecycle value. Nothing
                is written in that case.
        """
        if not is_valid_status(status):
            raise InvalidStatusError(status)

        values = {"status": status}
        terminal = status in TERMINAL_STATUSES
        if terminal:
            values["resolution_date"] = func.now()

        stmt = (
            update(ServiceRequest)
            .where(ServiceRequest.request_id == request_id)
            .values(**values)
            .returning(ServiceRequest)
        )
        async with self.database.session() as session:
            result = await session.execute(stmt)
            record = result.scalar_one_or_none()
            await session.commit()

        if record is None:
            logger.warning("Status update for unknown request %s", request_id)
            return None

        logger.info(
            "Request %s moved to %s by %s", request_id, status, user_id
        )
        if terminal:
            await self.increment_resolved_count(record.user_id)
        return record

    async def increment_resolved_count(self, user_id: str) -> bool:
        """Bump the owner's resolved counter; failures are logged, never raised."""
        return await best_effort("resolved_count", self._increment_resolved_count(user_id))

    async def _increment_resolved_count(self, user_id: str) -> None:
        stmt = (
            update(Citizen)
            .where(Citizen.user_id == user_id)
            .values(total_requests_resolved=Citizen.total_requests_resolved + 1)
        )
        async with self.database.session() as session:
            result = await session.execute(stmt)
            await session.commit()

        if not result.rowcount:
            logger.warning("No citizen record to update for user %s", user_id)
