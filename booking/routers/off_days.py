from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, col, select

from booking.database import get_session
from booking.models.business import Business, Location
from booking.models.off_day import OffDay, OffDayCreate
from booking.core.security import get_current_business

router = APIRouter(prefix="/off-days", tags=["off-days"])


@router.get("/")
def list_off_days(
    location_id: Optional[int] = None,
    session: Session = Depends(get_session),
    current_business: Business = Depends(get_current_business),
):
    """Com unidade: só as folgas da unidade. Sem unidade: só as folgas gerais."""
    query = select(OffDay).where(OffDay.business_id == current_business.id)
    if location_id is not None:
        query = query.where(OffDay.location_id == location_id)
    else:
        query = query.where(col(OffDay.location_id).is_(None))

    return session.exec(query.order_by(OffDay.off_date)).all()


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_off_day(
    payload: OffDayCreate,
    session: Session = Depends(get_session),
    current_business: Business = Depends(get_current_business),
):
    if payload.location_id is not None:
        location = session.get(Location, payload.location_id)
        if not location or location.business_id != current_business.id:
            raise HTTPException(status_code=404, detail="Unidade não encontrada")

    duplicated = session.exec(
        select(OffDay).where(
            OffDay.business_id == current_business.id,
            OffDay.off_date == payload.off_date,
            OffDay.location_id == payload.location_id,
        )
    ).first()
    if duplicated:
        raise HTTPException(status_code=400, detail="Essa data já está marcada como folga")

    # força ownership
    off_day = OffDay(
        business_id=current_business.id,
        location_id=payload.location_id,
        off_date=payload.off_date,
        reason=payload.reason,
    )

    session.add(off_day)
    session.commit()
    session.refresh(off_day)
    return off_day


@router.delete("/{off_day_id}")
def delete_off_day(
    off_day_id: int,
    session: Session = Depends(get_session),
    current_business: Business = Depends(get_current_business),
):
    off_day = session.get(OffDay, off_day_id)
    if not off_day:
        raise HTTPException(status_code=404, detail="Folga não encontrada")

    if off_day.business_id != current_business.id:
        raise HTTPException(status_code=403, detail="Sem permissão")

    session.delete(off_day)
    session.commit()
    return {"message": "Folga removida"}
