from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select

from app.core.clock import utcnow
from app.database import get_session
from app.models.payment import Payment
from app.models.service_request import RequestStatus, ServiceRequest
from app.models.user import User
from app.core.security import get_current_customer, get_current_provider
from app.services.service_requests import ServiceRequestService


router = APIRouter(prefix="/payments", tags=["payments"])


# Create payment (simulated)
@router.post("/create/{request_id}", status_code=status.HTTP_201_CREATED)
def create_payment(
    request_id: int,
    session: Session = Depends(get_session),
    current_customer: User = Depends(get_current_customer),
):

    record = session.get(ServiceRequest, request_id)
    if not record:
        raise HTTPException(status_code=404, detail="Service request not found.")

    if record.customer_id != current_customer.id:
        raise HTTPException(status_code=403, detail="You are not authorized to pay for this service request.")

    if record.status != RequestStatus.COMPLETED:
        raise HTTPException(status_code=400, detail="Payment is only possible once the service is completed.")

    open_payment = session.exec(
        select(Payment).where(Payment.request_id == request_id, Payment.status == "pending")
    ).first()
    if open_payment:
        raise HTTPException(status_code=400, detail="A pending payment already exists for this service request.")

    payment = Payment(
        request_id=request_id,
        provider="manual",
        amount=record.service_price_snapshot,
        status="pending",
    )

    session.add(payment)
    session.commit()
    session.refresh(payment)

    return payment


# Confirm payment (simulated)
@router.patch("/{payment_id}/confirm")
def confirm_payment(
    payment_id: int,
    session: Session = Depends(get_session),
    current_provider: User = Depends(get_current_provider),
):

    payment = session.get(Payment, payment_id)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found.")

    record = session.get(ServiceRequest, payment.request_id)

    if record.provider_id != current_provider.id:
        raise HTTPException(status_code=403, detail="You are not authorized to confirm this payment.")

    if payment.status == "paid":
        raise HTTPException(status_code=400, detail="Payment already confirmed.")

    payment.status = "paid"
    payment.paid_at = utcnow()
    session.add(payment)

    # commits the payment together with the request status
    ServiceRequestService(session).complete_payment(record)

    session.refresh(payment)
    return payment
