from typing import Optional
from datetime import date, datetime
from sqlmodel import SQLModel, Field


class OffDay(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    business_id: int = Field(foreign_key="business.id", index=True)

    # NULL = folga geral, vale para todas as unidades
    location_id: Optional[int] = Field(default=None, foreign_key="location.id", index=True)

    off_date: date = Field(index=True)
    reason: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)


class OffDayCreate(SQLModel):
    off_date: date
    location_id: Optional[int] = None
    reason: Optional[str] = None
