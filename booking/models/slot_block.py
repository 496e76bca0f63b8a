from typing import Optional
from datetime import date, datetime, time
from sqlmodel import SQLModel, Field


class SlotBlock(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    business_id: int = Field(foreign_key="business.id", index=True)
    service_id: int = Field(foreign_key="service.id", index=True)

    blocked_date: date = Field(index=True)
    start_time: time

    reason: str = "Bloqueio"

    created_at: datetime = Field(default_factory=datetime.utcnow)


class SlotBlockCreate(SQLModel):
    service_id: int
    blocked_date: date
    start_time: time
    reason: str = "Bloqueio"
