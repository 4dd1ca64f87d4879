from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.database import get_session
from app.models.service_request import (
    RequestStatus,
    ServiceRequestCreate,
    ServiceRequestRead,
    StatusUpdate,
)
from app.models.user import User
from app.core.security import get_current_customer, get_current_provider
from app.services.service_requests import ServiceRequestService


router = APIRouter(prefix="/service-requests", tags=["service-requests"])


def get_request_service(session: Session = Depends(get_session)) -> ServiceRequestService:
    return ServiceRequestService(session)


# Book a service (customer)
@router.post("", status_code=status.HTTP_201_CREATED)
def create_service_request(
    payload: ServiceRequestCreate,
    service: ServiceRequestService = Depends(get_request_service),
    current_customer: User = Depends(get_current_customer),
):
    record = service.create(payload, current_customer)
    return {
        "status": "success",
        "message": "Service request created successfully. Waiting for provider confirmation.",
        "data": {"serviceRequest": ServiceRequestRead.from_record(record).to_json()},
    }


# Listings: providers see requests assigned to them, customers the ones they made
@router.get("/provider")
def list_provider_requests(
    status: Optional[RequestStatus] = None,
    service: ServiceRequestService = Depends(get_request_service),
    current_provider: User = Depends(get_current_provider),
):
    requests = service.list_for_provider(current_provider.id, status)
    return {
        "status": "success",
        "results": len(requests),
        "data": {"serviceRequests": [r.to_json() for r in requests]},
    }


@router.get("/customer")
def list_customer_requests(
    status: Optional[RequestStatus] = None,
    service: ServiceRequestService = Depends(get_request_service),
    current_customer: User = Depends(get_current_customer),
):
    requests = service.list_for_customer(current_customer.id, status)
    return {
        "status": "success",
        "results": len(requests),
        "data": {"serviceRequests": [r.to_json() for r in requests]},
    }


# Change status (provider)
@router.patch("/{request_id}/provider")
def update_service_request_status(
    request_id: int,
    payload: StatusUpdate,
    service: ServiceRequestService = Depends(get_request_service),
    current_provider: User = Depends(get_current_provider),
):
    record = service.update_status(request_id, payload.status, current_provider.id)
    return {
        "status": "success",
        "message": f"Service request status updated to {record.status.value} successfully.",
        "data": {"serviceRequest": ServiceRequestRead.from_record(record).to_json()},
    }
