"""
Objetos de valor usados no cálculo de horários disponíveis.

São montados uma única vez no repositório (a partir das linhas do banco) e
nunca alterados depois; o cálculo não faz parse de string nenhuma.
"""

from datetime import date, datetime, time
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, model_validator


class _ValueObject(BaseModel):
    model_config = ConfigDict(frozen=True)


class TimeSpan(_ValueObject):
    """Par início/fim como gravado no banco, ainda sem validação."""

    start_time: time
    end_time: time


class TimeRange(TimeSpan):
    @model_validator(mode="after")
    def _check_order(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time deve ser maior que start_time")
        return self

    def overlaps(self, other: "TimeRange") -> bool:
        return self.start_time < other.end_time and self.end_time > other.start_time


class DayScheduleWindow(_ValueObject):
    business_id: int
    # 0=domingo ... 6=sábado
    day_of_week: int
    location_id: Optional[int] = None
    is_closed: bool = False
    open_time: Optional[time] = None
    close_time: Optional[time] = None
    # expediente dividido; vazio = usa open_time/close_time.
    # validado só quando o dia é consultado
    ranges: List[TimeSpan] = []


class ServiceScheduleOverride(_ValueObject):
    service_id: int
    day_of_week: int
    ranges: List[TimeSpan]


class SlotBlock(_ValueObject):
    business_id: int
    service_id: int
    blocked_date: date
    start_time: time


class OffDay(_ValueObject):
    business_id: int
    off_date: date
    location_id: Optional[int] = None


class ExistingBooking(_ValueObject):
    service_id: int
    start: datetime
    status: str


class ServiceParameters(_ValueObject):
    service_id: int
    business_id: int
    duration_minutes: int
    buffer_minutes: int = 0
    slot_capacity: Optional[int] = 1


class AvailabilitySnapshot(_ValueObject):
    """Resultado das consultas de um dia. ``None`` = consulta ainda carregando."""

    business_hours: Optional[List[DayScheduleWindow]] = None
    service_overrides: Optional[List[ServiceScheduleOverride]] = None
    off_days: Optional[List[OffDay]] = None
    slot_blocks: Optional[List[SlotBlock]] = None
    bookings: Optional[List[ExistingBooking]] = None

    @property
    def is_loading(self) -> bool:
        return any(
            value is None
            for value in (
                self.business_hours,
                self.service_overrides,
                self.off_days,
                self.slot_blocks,
                self.bookings,
            )
        )


class AvailableSlot(_ValueObject):
    time: str  # HH:MM
    label: str  # h:mm AM


class AvailabilityResult(_ValueObject):
    slots: List[AvailableSlot] = []
    reason: Optional[str] = None
    is_loading: bool = False
    off_days: List[date] = []

    @property
    def labels(self) -> List[str]:
        return [slot.label for slot in self.slots]

    @property
    def times(self) -> List[str]:
        return [slot.time for slot in self.slots]
