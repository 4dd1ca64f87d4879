from typing import Optional
from sqlmodel import SQLModel, Field


class ServiceBase(SQLModel):
    name: str = Field(index=True)
    description: Optional[str] = None
    price: float
    active: bool = True


class Service(ServiceBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    provider_id: int = Field(foreign_key="user.id", index=True)


class ServiceCreate(ServiceBase):
    pass
