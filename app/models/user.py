from typing import Optional
from sqlmodel import SQLModel, Field


ROLE_CUSTOMER = "customer"
ROLE_PROVIDER = "provider"
ROLES = (ROLE_CUSTOMER, ROLE_PROVIDER)


class UserBase(SQLModel):
    name: str
    email: str = Field(index=True, unique=True)
    phone_number: Optional[str] = None
    role: str  # "provider" or "customer"


class User(UserBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    password_hash: str


class UserCreate(UserBase):
    password: str
