from typing import Optional
from datetime import datetime
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

from app.core.clock import utcnow


class Payment(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    request_id: int = Field(foreign_key="servicerequest.id", index=True)

    provider: str  # manual
    external_id: Optional[str] = None

    amount: float

    status: str = Field(default="pending", index=True)
    # pending | paid

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    paid_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
