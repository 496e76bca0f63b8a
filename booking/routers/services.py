from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select

from booking.database import get_session
from booking.models.business import Business
from booking.models.service import Service, ServiceCreate
from booking.models.service_schedule import ServiceSchedule, ServiceScheduleDay
from booking.core.security import get_current_business
from booking.routers.business_hours import validate_ranges


router = APIRouter(
    prefix="/services",
    tags=["services"]
)


def _get_owned_service(session: Session, business: Business, service_id: int) -> Service:
    service = session.get(Service, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Serviço não encontrado")

    if service.business_id != business.id:
        raise HTTPException(status_code=403, detail="Sem permissão")

    return service


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_service(
    payload: ServiceCreate,
    session: Session = Depends(get_session),
    current_business: Business = Depends(get_current_business),
):
    if payload.duration_minutes <= 0:
        raise HTTPException(status_code=400, detail="duration_minutes deve ser maior que zero")

    if payload.buffer_minutes < 0:
        raise HTTPException(status_code=400, detail="buffer_minutes não pode ser negativo")

    if payload.slot_capacity < 1:
        raise HTTPException(status_code=400, detail="slot_capacity deve ser pelo menos 1")

    service = Service(**payload.model_dump(), business_id=current_business.id)

    session.add(service)
    session.commit()
    session.refresh(service)

    return service


@router.get("/")
def list_my_services(
    session: Session = Depends(get_session),
    current_business: Business = Depends(get_current_business),
):
    services = session.exec(
        select(Service).where(Service.business_id == current_business.id)
    ).all()

    return services


# =========================
# HORÁRIO PRÓPRIO DO SERVIÇO
# (substitui o expediente do negócio nos dias configurados)
# =========================
@router.get("/{service_id}/schedule")
def get_service_schedule(
    service_id: int,
    session: Session = Depends(get_session),
    current_business: Business = Depends(get_current_business),
):
    _get_owned_service(session, current_business, service_id)

    rows = session.exec(
        select(ServiceSchedule)
        .where(ServiceSchedule.service_id == service_id)
        .order_by(ServiceSchedule.weekday, ServiceSchedule.display_order, ServiceSchedule.start_time)
    ).all()

    days = {}
    for row in rows:
        days.setdefault(row.weekday, []).append(
            {"start_time": row.start_time.isoformat(), "end_time": row.end_time.isoformat()}
        )

    return [{"weekday": weekday, "ranges": ranges} for weekday, ranges in sorted(days.items())]


@router.put("/{service_id}/schedule")
def replace_service_schedule(
    service_id: int,
    payload: List[ServiceScheduleDay],
    session: Session = Depends(get_session),
    current_business: Business = Depends(get_current_business),
):
    """Troca todo o horário do serviço. Dia sem intervalos = segue o expediente do negócio."""
    _get_owned_service(session, current_business, service_id)

    seen = set()
    for day in payload:
        if day.weekday < 0 or day.weekday > 6:
            raise HTTPException(status_code=400, detail="weekday deve ser 0..6")
        if day.weekday in seen:
            raise HTTPException(status_code=400, detail=f"weekday {day.weekday} repetido")
        seen.add(day.weekday)
        validate_ranges(day.ranges)

    existing = session.exec(
        select(ServiceSchedule).where(ServiceSchedule.service_id == service_id)
    ).all()
    for row in existing:
        session.delete(row)

    for day in payload:
        for index, r in enumerate(day.ranges):
            session.add(
                ServiceSchedule(
                    service_id=service_id,
                    weekday=day.weekday,
                    start_time=r.start_time,
                    end_time=r.end_time,
                    display_order=index,
                )
            )

    session.commit()
    return get_service_schedule(service_id, session, current_business)
