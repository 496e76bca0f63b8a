from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field


class Appointment(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    business_id: int = Field(foreign_key="business.id", index=True)
    service_id: int = Field(foreign_key="service.id", index=True)
    location_id: Optional[int] = Field(default=None, foreign_key="location.id", index=True)

    customer_id: Optional[str] = Field(default=None, index=True)
    customer_name: Optional[str] = None

    # horário local do negócio
    start_time: datetime = Field(index=True)

    # STATUS DO AGENDAMENTO
    status: str = Field(default="pending", index=True)
    # pending | confirmed | cancelled | completed | no_show

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)

    cancelled_at: Optional[datetime] = None
    cancel_reason: Optional[str] = None
