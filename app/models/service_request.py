from enum import Enum
from typing import Optional, Union
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic import Field as PydanticField
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

from app.core.clock import utcnow


class RequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    PAYMENT_COMPLETED = "PaymentCompleted"


class ServiceRequest(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    customer_id: int = Field(foreign_key="user.id", index=True)
    provider_id: int = Field(foreign_key="user.id", index=True)
    service_id: int = Field(foreign_key="service.id", index=True)

    # snapshot (never resynced with the live service/customer)
    service_name_snapshot: str
    service_price_snapshot: float
    customer_name_snapshot: Optional[str] = None
    customer_phone_number_snapshot: Optional[str] = None

    customer_address: str
    nearest_point: Optional[str] = None

    time_slot: datetime = Field(sa_type=DateTime(timezone=True), index=True)

    status: RequestStatus = Field(default=RequestStatus.PENDING, index=True)

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), index=True)


# API payloads

class ServiceRequestCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    provider_id: int = PydanticField(alias="providerId")
    service_name: str = PydanticField(alias="serviceName", min_length=1)
    service_price: float = PydanticField(alias="servicePrice", gt=0)
    customer_address: str = PydanticField(alias="customerAddress", min_length=1)
    nearest_point: Optional[str] = PydanticField(default=None, alias="nearestPoint")
    # parsed by the service so a bad date is reported like the other booking rules
    time_slot: str = PydanticField(min_length=1)


class StatusUpdate(BaseModel):
    status: str


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone_number: Optional[str] = None


class ServiceSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None


class ServiceRequestRead(BaseModel):
    """Response shape; references are ids unless the listing attached a summary."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    customer: Union[UserSummary, int]
    provider: Union[UserSummary, int]
    service: Union[ServiceSummary, int]
    service_name_snapshot: str = PydanticField(alias="serviceNameSnapshot")
    service_price_snapshot: float = PydanticField(alias="servicePriceSnapshot")
    customer_name_snapshot: Optional[str] = PydanticField(default=None, alias="customerNameSnapshot")
    customer_phone_number_snapshot: Optional[str] = PydanticField(
        default=None, alias="customerPhoneNumberSnapshot"
    )
    customer_address: str = PydanticField(alias="customerAddress")
    nearest_point: Optional[str] = PydanticField(default=None, alias="nearestPoint")
    time_slot: datetime
    status: RequestStatus
    created_at: datetime = PydanticField(alias="createdAt")

    @classmethod
    def from_record(
        cls,
        record: ServiceRequest,
        customer: Optional[UserSummary] = None,
        provider: Optional[UserSummary] = None,
        service: Optional[ServiceSummary] = None,
    ) -> "ServiceRequestRead":
        return cls(
            id=record.id,
            customer=customer or record.customer_id,
            provider=provider or record.provider_id,
            service=service or record.service_id,
            service_name_snapshot=record.service_name_snapshot,
            service_price_snapshot=record.service_price_snapshot,
            customer_name_snapshot=record.customer_name_snapshot,
            customer_phone_number_snapshot=record.customer_phone_number_snapshot,
            customer_address=record.customer_address,
            nearest_point=record.nearest_point,
            time_slot=record.time_slot,
            status=record.status,
            created_at=record.created_at,
        )

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")
