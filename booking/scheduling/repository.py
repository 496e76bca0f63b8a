"""
Consultas que alimentam o cálculo de horários.

A sessão é injetada (``AvailabilityRepository(session)``); cada linha do
banco vira um objeto de valor tipado aqui, uma única vez.
"""

import logging
from collections import defaultdict
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional

from sqlalchemy import or_
from sqlmodel import Session, col, select

from booking.config import ACTIVE_BOOKING_STATUSES
from booking.models.appointment import Appointment
from booking.models.business import Location
from booking.models.business_hours import BusinessHourRange, BusinessHours
from booking.models.off_day import OffDay as OffDayRow
from booking.models.service import Service
from booking.models.service_schedule import ServiceSchedule
from booking.models.slot_block import SlotBlock as SlotBlockRow
from booking.scheduling.availability import compute_available_slots
from booking.scheduling.types import (
    AvailabilityResult,
    AvailabilitySnapshot,
    DayScheduleWindow,
    ExistingBooking,
    OffDay,
    ServiceParameters,
    ServiceScheduleOverride,
    SlotBlock,
    TimeSpan,
)

logger = logging.getLogger(__name__)


def _day_bounds(d: date):
    start = datetime.combine(d, time(0, 0))
    end = start + timedelta(days=1)
    return start, end


class AvailabilityRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_service_parameters(self, service_id: int) -> Optional[ServiceParameters]:
        service = self.session.get(Service, service_id)
        if not service or service.status != "active":
            return None
        return ServiceParameters(
            service_id=service.id,
            business_id=service.business_id,
            duration_minutes=service.duration_minutes,
            buffer_minutes=service.buffer_minutes or 0,
            # 0 chega ao cálculo e vira erro de configuração
            slot_capacity=1 if service.slot_capacity is None else service.slot_capacity,
        )

    def is_location_active(self, business_id: int, location_id: int) -> bool:
        location = self.session.get(Location, location_id)
        return bool(location and location.business_id == business_id and location.active)

    def list_business_hours(self, business_id: int) -> List[DayScheduleWindow]:
        rows = self.session.exec(
            select(BusinessHours)
            .where(BusinessHours.business_id == business_id)
            .order_by(BusinessHours.weekday, col(BusinessHours.location_id).is_(None).desc(), BusinessHours.location_id)
        ).all()

        ranges_by_hours_id: Dict[int, List[TimeSpan]] = defaultdict(list)
        hours_ids = [row.id for row in rows]
        if hours_ids:
            ranges = self.session.exec(
                select(BusinessHourRange)
                .where(col(BusinessHourRange.business_hours_id).in_(hours_ids))
                .order_by(BusinessHourRange.display_order, BusinessHourRange.start_time)
            ).all()
            for r in ranges:
                ranges_by_hours_id[r.business_hours_id].append(
                    TimeSpan(start_time=r.start_time, end_time=r.end_time)
                )

        return [
            DayScheduleWindow(
                business_id=row.business_id,
                day_of_week=row.weekday,
                location_id=row.location_id,
                is_closed=row.is_closed,
                open_time=row.open_time,
                close_time=row.close_time,
                ranges=ranges_by_hours_id.get(row.id, []),
            )
            for row in rows
        ]

    def list_service_overrides(self, service_id: int) -> List[ServiceScheduleOverride]:
        rows = self.session.exec(
            select(ServiceSchedule)
            .where(ServiceSchedule.service_id == service_id)
            .order_by(ServiceSchedule.weekday, ServiceSchedule.display_order, ServiceSchedule.start_time)
        ).all()

        by_weekday: Dict[int, List[TimeSpan]] = defaultdict(list)
        for row in rows:
            by_weekday[row.weekday].append(TimeSpan(start_time=row.start_time, end_time=row.end_time))

        return [
            ServiceScheduleOverride(service_id=service_id, day_of_week=weekday, ranges=ranges)
            for weekday, ranges in sorted(by_weekday.items())
        ]

    def list_off_days(self, business_id: int, location_id: Optional[int] = None) -> List[OffDay]:
        query = select(OffDayRow).where(OffDayRow.business_id == business_id)
        if location_id is not None:
            query = query.where(
                or_(OffDayRow.location_id == location_id, col(OffDayRow.location_id).is_(None))
            )
        else:
            query = query.where(col(OffDayRow.location_id).is_(None))

        rows = self.session.exec(query.order_by(OffDayRow.off_date)).all()
        return [
            OffDay(business_id=row.business_id, off_date=row.off_date, location_id=row.location_id)
            for row in rows
        ]

    def list_slot_blocks(self, business_id: int, service_id: int, day: date) -> List[SlotBlock]:
        rows = self.session.exec(
            select(SlotBlockRow).where(
                SlotBlockRow.business_id == business_id,
                SlotBlockRow.service_id == service_id,
                SlotBlockRow.blocked_date == day,
            )
        ).all()
        return [
            SlotBlock(
                business_id=row.business_id,
                service_id=row.service_id,
                blocked_date=row.blocked_date,
                start_time=row.start_time,
            )
            for row in rows
        ]

    def list_active_bookings(self, business_id: int, day: date) -> List[ExistingBooking]:
        day_start, day_end = _day_bounds(day)
        rows = self.session.exec(
            select(Appointment).where(
                Appointment.business_id == business_id,
                Appointment.start_time >= day_start,
                Appointment.start_time < day_end,
                col(Appointment.status).in_(ACTIVE_BOOKING_STATUSES),
            )
        ).all()
        return [
            ExistingBooking(service_id=row.service_id, start=row.start_time, status=row.status)
            for row in rows
        ]

    def load_snapshot(
        self,
        business_id: int,
        service_id: int,
        day: date,
        location_id: Optional[int] = None,
    ) -> AvailabilitySnapshot:
        return AvailabilitySnapshot(
            business_hours=self.list_business_hours(business_id),
            service_overrides=self.list_service_overrides(service_id),
            off_days=self.list_off_days(business_id, location_id),
            slot_blocks=self.list_slot_blocks(business_id, service_id, day),
            bookings=self.list_active_bookings(business_id, day),
        )


def get_available_slots(
    repository: AvailabilityRepository,
    day: date,
    service_id: int,
    location_id: Optional[int] = None,
    now: Optional[datetime] = None,
) -> Optional[AvailabilityResult]:
    """
    Carrega tudo do dia e roda o cálculo.

    ``None`` = serviço inexistente ou inativo, ou unidade inexistente,
    inativa ou de outro negócio.
    """
    params = repository.get_service_parameters(service_id)
    if params is None:
        logger.info(f"Serviço {service_id} não encontrado ou inativo")
        return None

    if location_id is not None and not repository.is_location_active(params.business_id, location_id):
        logger.info(f"Unidade {location_id} não encontrada ou inativa")
        return None

    snapshot = repository.load_snapshot(params.business_id, service_id, day, location_id)
    result = compute_available_slots(
        day,
        params.business_id,
        service_id,
        location_id,
        params,
        snapshot,
        now=now,
    )
    logger.info(
        f"Disponibilidade serviço={service_id} dia={day.isoformat()} unidade={location_id}: "
        f"{len(result.slots)} horários (motivo={result.reason})"
    )
    return result
