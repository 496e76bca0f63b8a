from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select

from booking.database import get_session
from booking.models.business import Business
from booking.models.service import Service
from booking.models.slot_block import SlotBlock, SlotBlockCreate
from booking.core.security import get_current_business

router = APIRouter(prefix="/slot-blocks", tags=["slot-blocks"])


@router.get("/")
def list_slot_blocks(
    day: Optional[date] = None,
    session: Session = Depends(get_session),
    current_business: Business = Depends(get_current_business),
):
    query = select(SlotBlock).where(SlotBlock.business_id == current_business.id)
    if day is not None:
        query = query.where(SlotBlock.blocked_date == day)

    return session.exec(query.order_by(SlotBlock.blocked_date, SlotBlock.start_time)).all()


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_slot_block(
    payload: SlotBlockCreate,
    session: Session = Depends(get_session),
    current_business: Business = Depends(get_current_business),
):
    service = session.get(Service, payload.service_id)
    if not service or service.business_id != current_business.id:
        raise HTTPException(status_code=404, detail="Serviço não encontrado")

    # só hora/minuto importam
    start_time = payload.start_time.replace(second=0, microsecond=0)

    duplicated = session.exec(
        select(SlotBlock).where(
            SlotBlock.service_id == payload.service_id,
            SlotBlock.blocked_date == payload.blocked_date,
            SlotBlock.start_time == start_time,
        )
    ).first()
    if duplicated:
        raise HTTPException(status_code=400, detail="Esse horário já está bloqueado")

    # força ownership
    block = SlotBlock(
        business_id=current_business.id,
        service_id=payload.service_id,
        blocked_date=payload.blocked_date,
        start_time=start_time,
        reason=payload.reason,
    )

    session.add(block)
    session.commit()
    session.refresh(block)
    return block


@router.delete("/{block_id}")
def delete_slot_block(
    block_id: int,
    session: Session = Depends(get_session),
    current_business: Business = Depends(get_current_business),
):
    block = session.get(SlotBlock, block_id)
    if not block:
        raise HTTPException(status_code=404, detail="Bloqueio não encontrado")

    if block.business_id != current_business.id:
        raise HTTPException(status_code=403, detail="Sem permissão")

    session.delete(block)
    session.commit()
    return {"message": "Bloqueio removido"}
