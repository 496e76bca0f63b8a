from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, col, select

from booking.database import get_session
from booking.models.business import Business, Location
from booking.models.business_hours import BusinessHourRange, BusinessHours, BusinessHoursUpdate, TimeRangeIn
from booking.core.security import get_current_business

router = APIRouter(prefix="/business-hours", tags=["business-hours"])


def validate_ranges(ranges: List[TimeRangeIn]):
    """Cada turno com fim depois do início e sem sobreposição entre eles."""
    for r in ranges:
        if r.end_time <= r.start_time:
            raise HTTPException(status_code=400, detail="end_time deve ser maior que start_time")

    ordered = sorted(ranges, key=lambda r: r.start_time)
    for prev, nxt in zip(ordered, ordered[1:]):
        if nxt.start_time < prev.end_time:
            raise HTTPException(status_code=400, detail="Os intervalos do dia não podem se sobrepor")


def _check_location(session: Session, business: Business, location_id: Optional[int]):
    if location_id is None:
        return
    location = session.get(Location, location_id)
    if not location or location.business_id != business.id:
        raise HTTPException(status_code=404, detail="Unidade não encontrada")


def _ranges_for(session: Session, hours_id: int) -> List[BusinessHourRange]:
    return session.exec(
        select(BusinessHourRange)
        .where(BusinessHourRange.business_hours_id == hours_id)
        .order_by(BusinessHourRange.display_order, BusinessHourRange.start_time)
    ).all()


def _serialize(session: Session, hours: BusinessHours) -> dict:
    data = hours.model_dump()
    data["ranges"] = [
        {"start_time": r.start_time.isoformat(), "end_time": r.end_time.isoformat()}
        for r in _ranges_for(session, hours.id)
    ]
    return data


@router.get("/")
def list_business_hours(
    location_id: Optional[int] = None,
    session: Session = Depends(get_session),
    current_business: Business = Depends(get_current_business),
):
    query = select(BusinessHours).where(BusinessHours.business_id == current_business.id)
    if location_id is not None:
        query = query.where(BusinessHours.location_id == location_id)
    else:
        query = query.where(col(BusinessHours.location_id).is_(None))

    rows = session.exec(query.order_by(BusinessHours.weekday)).all()
    return [_serialize(session, row) for row in rows]


@router.put("/{weekday}")
def upsert_business_hours(
    weekday: int,
    payload: BusinessHoursUpdate,
    location_id: Optional[int] = None,
    session: Session = Depends(get_session),
    current_business: Business = Depends(get_current_business),
):
    """
    weekday: 0=domingo ... 6=sábado
    location_id: sem unidade = horário padrão do negócio
    """
    if weekday < 0 or weekday > 6:
        raise HTTPException(status_code=400, detail="weekday deve ser 0..6")

    _check_location(session, current_business, location_id)

    # validações básicas
    if not payload.is_closed:
        if payload.open_time is None or payload.close_time is None:
            raise HTTPException(status_code=400, detail="open_time e close_time são obrigatórios quando is_closed=false")

        if payload.close_time <= payload.open_time:
            raise HTTPException(status_code=400, detail="close_time deve ser maior que open_time")

        validate_ranges(payload.ranges)

    existing = session.exec(
        select(BusinessHours).where(
            BusinessHours.business_id == current_business.id,
            BusinessHours.weekday == weekday,
            BusinessHours.location_id == location_id,
        )
    ).first()

    if existing:
        hours = existing
        hours.is_closed = payload.is_closed
        hours.open_time = payload.open_time
        hours.close_time = payload.close_time
    else:
        hours = BusinessHours(
            business_id=current_business.id,
            location_id=location_id,
            weekday=weekday,
            is_closed=payload.is_closed,
            open_time=payload.open_time,
            close_time=payload.close_time,
        )
    session.add(hours)
    session.flush()

    # turnos: apaga os antigos e grava os novos (dia fechado fica sem turnos)
    for old in _ranges_for(session, hours.id):
        session.delete(old)

    if not payload.is_closed:
        for index, r in enumerate(payload.ranges):
            session.add(
                BusinessHourRange(
                    business_hours_id=hours.id,
                    start_time=r.start_time,
                    end_time=r.end_time,
                    display_order=index,
                )
            )

    session.commit()
    session.refresh(hours)
    return _serialize(session, hours)
