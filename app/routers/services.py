from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select

from app.database import get_session
from app.models.service import Service, ServiceCreate
from app.models.user import ROLE_PROVIDER, User
from app.core.security import get_current_provider


router = APIRouter(
    prefix="/services",
    tags=["services"]
)


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_service(
    payload: ServiceCreate,
    session: Session = Depends(get_session),
    current_provider: User = Depends(get_current_provider),
):
    service = Service.model_validate(payload, update={"provider_id": current_provider.id})

    session.add(service)
    session.commit()
    session.refresh(service)

    return service


@router.get("/")
def list_my_services(
    session: Session = Depends(get_session),
    current_provider: User = Depends(get_current_provider),
):
    services = session.exec(
        select(Service).where(Service.provider_id == current_provider.id)
    ).all()

    return services


@router.get("/provider/{provider_id}")
def list_provider_services(
    provider_id: int,
    session: Session = Depends(get_session),
):
    provider = session.get(User, provider_id)
    if not provider or provider.role != ROLE_PROVIDER:
        raise HTTPException(status_code=404, detail="Provider not found.")

    return session.exec(
        select(Service).where(Service.provider_id == provider_id, Service.active == True)  # noqa: E712
    ).all()
