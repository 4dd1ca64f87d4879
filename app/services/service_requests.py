"""Service request business logic: booking, role listings and status changes."""

import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from sqlmodel import Session, select

from app.core.clock import utcnow
from app.core.errors import ForbiddenError, InvalidRequestError, NotFoundError
from app.models.service import Service
from app.models.service_request import (
    RequestStatus,
    ServiceRequest,
    ServiceRequestCreate,
    ServiceRequestRead,
    ServiceSummary,
    UserSummary,
)
from app.models.user import ROLE_PROVIDER, User
from app.services.status_transitions import PROVIDER_SETTABLE_STATUSES, is_valid_transition

logger = logging.getLogger(__name__)


def parse_time_slot(value: str) -> datetime:
    """Parse an ISO-8601 slot into aware UTC. Offsets are converted, naive input is taken as UTC."""
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        # OverflowError: offset conversion leaves the supported date range
        raise InvalidRequestError("Invalid date or time format for the time slot.") from None


class ServiceRequestService:
    """Service layer for service request operations"""

    def __init__(self, session: Session):
        self.session = session

    # Create (customer)
    def create(self, data: ServiceRequestCreate, customer: User) -> ServiceRequest:
        provider = self.session.exec(
            select(User).where(User.id == data.provider_id, User.role == ROLE_PROVIDER)
        ).first()
        if not provider:
            raise NotFoundError("Invalid service provider selected.")

        # services are matched by name within the provider; names are assumed unique there
        service = self.session.exec(
            select(Service).where(
                Service.name == data.service_name,
                Service.provider_id == data.provider_id,
            )
        ).first()
        if not service:
            raise NotFoundError(
                f'Service "{data.service_name}" not found for the selected provider. '
                "Booking cannot proceed."
            )

        time_slot = parse_time_slot(data.time_slot)
        if time_slot <= utcnow():
            raise InvalidRequestError("The requested time slot cannot be in the past.")

        record = ServiceRequest(
            customer_id=customer.id,
            provider_id=provider.id,
            service_id=service.id,
            service_name_snapshot=data.service_name,
            service_price_snapshot=data.service_price,
            customer_name_snapshot=customer.name,
            customer_phone_number_snapshot=customer.phone_number,
            customer_address=data.customer_address,
            nearest_point=data.nearest_point,
            time_slot=time_slot,
            status=RequestStatus.PENDING,
        )
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)

        logger.info(
            "Service request %s created by customer %s for provider %s",
            record.id, customer.id, provider.id,
        )
        return record

    # Listings
    def list_for_provider(
        self, provider_id: int, status: Optional[RequestStatus] = None
    ) -> List[ServiceRequestRead]:
        records = self._list(ServiceRequest.provider_id == provider_id, status)
        return self._with_summaries(records, attach_customer=True, attach_provider=False)

    def list_for_customer(
        self, customer_id: int, status: Optional[RequestStatus] = None
    ) -> List[ServiceRequestRead]:
        records = self._list(ServiceRequest.customer_id == customer_id, status)
        return self._with_summaries(records, attach_customer=False, attach_provider=True)

    def _list(self, owner_clause, status: Optional[RequestStatus]) -> List[ServiceRequest]:
        query = select(ServiceRequest).where(owner_clause)
        if status is not None:
            query = query.where(ServiceRequest.status == status)
        query = query.order_by(ServiceRequest.created_at.desc(), ServiceRequest.id.desc())
        return list(self.session.exec(query).all())

    def _with_summaries(
        self,
        records: Iterable[ServiceRequest],
        attach_customer: bool,
        attach_provider: bool,
    ) -> List[ServiceRequestRead]:
        records = list(records)
        if not records:
            return []

        user_ids = set()
        if attach_customer:
            user_ids.update(r.customer_id for r in records)
        if attach_provider:
            user_ids.update(r.provider_id for r in records)

        users: Dict[int, UserSummary] = {}
        if user_ids:
            for u in self.session.exec(select(User).where(User.id.in_(list(user_ids)))).all():
                users[u.id] = UserSummary.model_validate(u)

        service_ids = {r.service_id for r in records}
        services = self.session.exec(select(Service).where(Service.id.in_(list(service_ids)))).all()
        service_map = {s.id: ServiceSummary.model_validate(s) for s in services}

        return [
            ServiceRequestRead.from_record(
                r,
                customer=users.get(r.customer_id) if attach_customer else None,
                provider=users.get(r.provider_id) if attach_provider else None,
                service=service_map.get(r.service_id),
            )
            for r in records
        ]

    # Status (provider)
    def update_status(self, request_id: int, new_status: str, provider_id: int) -> ServiceRequest:
        record = self.session.get(ServiceRequest, request_id)
        if not record:
            raise NotFoundError("Service request not found.")

        if record.provider_id != provider_id:
            raise ForbiddenError("You are not authorized to update this service request.")

        requested = self._provider_status(new_status)
        return self._transition(record, requested)

    def complete_payment(self, record: ServiceRequest) -> ServiceRequest:
        """Payment confirmation event: completed -> PaymentCompleted."""
        return self._transition(record, RequestStatus.PAYMENT_COMPLETED)

    @staticmethod
    def _provider_status(value: Optional[str]) -> RequestStatus:
        try:
            requested = RequestStatus(value)
        except ValueError:
            requested = None

        if requested not in PROVIDER_SETTABLE_STATUSES:
            allowed = ", ".join(
                s.value for s in RequestStatus if s in PROVIDER_SETTABLE_STATUSES
            )
            raise InvalidRequestError(
                f"Invalid status value '{value}'. Provider can set status to: {allowed}."
            )
        return requested

    def _transition(self, record: ServiceRequest, requested: RequestStatus) -> ServiceRequest:
        current = record.status
        if not is_valid_transition(current, requested):
            logger.warning(
                "Rejected transition %s -> %s for service request %s",
                current.value, requested.value, record.id,
            )
            raise InvalidRequestError(
                f"Cannot change status from '{current.value}' to '{requested.value}'."
            )

        record.status = requested
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)

        logger.info(
            "Service request %s moved %s -> %s", record.id, current.value, requested.value
        )
        return record
