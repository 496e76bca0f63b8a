from typing import List, Optional
from datetime import time
from sqlmodel import SQLModel, Field

from booking.models.business_hours import TimeRangeIn


class ServiceSchedule(SQLModel, table=True):
    """Horário próprio do serviço num dia da semana; substitui o expediente do negócio."""

    id: Optional[int] = Field(default=None, primary_key=True)

    service_id: int = Field(foreign_key="service.id", index=True)

    # 0=domingo ... 6=sábado
    weekday: int = Field(index=True)

    start_time: time
    end_time: time
    display_order: int = 0


class ServiceScheduleDay(SQLModel):
    weekday: int
    ranges: List[TimeRangeIn] = []
