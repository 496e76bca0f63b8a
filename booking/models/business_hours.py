from typing import List, Optional
from datetime import time
from sqlmodel import SQLModel, Field


class BusinessHours(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    business_id: int = Field(foreign_key="business.id", index=True)

    # NULL = horário padrão do negócio (vale para todas as unidades)
    location_id: Optional[int] = Field(default=None, foreign_key="location.id", index=True)

    # 0=domingo ... 6=sábado
    weekday: int = Field(index=True)

    is_closed: bool = False

    open_time: Optional[time] = None
    close_time: Optional[time] = None


class BusinessHourRange(SQLModel, table=True):
    """Turno de um dia com expediente dividido (ex: 09-12 e 14-18)."""

    id: Optional[int] = Field(default=None, primary_key=True)

    business_hours_id: int = Field(foreign_key="businesshours.id", index=True)

    start_time: time
    end_time: time
    display_order: int = 0


class TimeRangeIn(SQLModel):
    start_time: time
    end_time: time


class BusinessHoursUpdate(SQLModel):
    is_closed: bool = False
    open_time: Optional[time] = None
    close_time: Optional[time] = None
    ranges: List[TimeRangeIn] = []
