import logging
from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from booking.database import get_session
from booking.scheduling.availability import REASON_CLOSED, REASON_OFF_DAY, applicable_off_days
from booking.scheduling.exceptions import SlotConfigurationError
from booking.scheduling.repository import AvailabilityRepository, get_available_slots


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/availability", tags=["availability"])


def get_repository(session: Session = Depends(get_session)) -> AvailabilityRepository:
    return AvailabilityRepository(session)


# =========================
# HORÁRIOS DISPONÍVEIS (dia + serviço)
# GET /availability/slots?service_id=1&day=2026-02-14&location_id=2
# =========================
@router.get("/slots")
def available_slots(
    service_id: int,
    day: date,
    location_id: Optional[int] = None,
    repository: AvailabilityRepository = Depends(get_repository),
) -> Dict:
    try:
        result = get_available_slots(repository, day, service_id, location_id)
    except SlotConfigurationError as e:
        logger.error(f"Configuração de agenda inválida (serviço {service_id}): {e}")
        raise HTTPException(
            status_code=422,
            detail=f"Configuração de horários inválida: {e}",
        )

    if result is None:
        raise HTTPException(status_code=404, detail="Serviço ou unidade não encontrado ou inativo")

    return {
        "service_id": service_id,
        "day": day.isoformat(),
        "location_id": location_id,
        "is_closed": result.reason in (REASON_CLOSED, REASON_OFF_DAY),
        "reason": result.reason,
        "is_loading": result.is_loading,
        "slots": [slot.model_dump() for slot in result.slots],
        "off_days": [d.isoformat() for d in result.off_days],
    }


# =========================
# FOLGAS (para desabilitar datas no calendário)
# =========================
@router.get("/off-days")
def off_days(
    business_id: int,
    location_id: Optional[int] = None,
    repository: AvailabilityRepository = Depends(get_repository),
) -> List[str]:
    rows = repository.list_off_days(business_id, location_id)
    return [d.isoformat() for d in applicable_off_days(rows, business_id, location_id)]
