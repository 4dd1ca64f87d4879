from collections import Counter

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from app.database import get_session
from app.core.security import get_current_provider
from app.models.user import User
from app.models.service_request import RequestStatus, ServiceRequest
from app.services.status_transitions import is_terminal


router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary")
def dashboard_summary(
    session: Session = Depends(get_session),
    current_provider: User = Depends(get_current_provider),
):
    requests = session.exec(
        select(ServiceRequest).where(ServiceRequest.provider_id == current_provider.id)
    ).all()

    by_status = Counter(r.status.value for r in requests)

    # revenue: only what has actually been paid, at the booked price
    revenue = sum(
        r.service_price_snapshot
        for r in requests
        if r.status == RequestStatus.PAYMENT_COMPLETED
    )

    # top services (by number of bookings)
    top_counter = Counter(r.service_name_snapshot for r in requests)
    top = [{"name": name, "count": qty} for name, qty in top_counter.most_common(5)]

    return {
        "provider_id": current_provider.id,
        "total_requests": len(requests),
        "status": {s.value: by_status.get(s.value, 0) for s in RequestStatus},
        "open_requests": sum(1 for r in requests if not is_terminal(r.status)),
        "revenue_paid": round(revenue, 2),
        "top_services": top,
    }
