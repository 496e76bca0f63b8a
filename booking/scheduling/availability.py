"""
Cálculo de horários disponíveis

Função pura: recebe o expediente, horários próprios do serviço, folgas,
bloqueios e agendamentos já carregados e devolve os horários de início
que ainda podem ser reservados numa data.

Ordem de prioridade para os intervalos do dia:
    1. horário próprio do serviço naquele dia da semana
    2. expediente dividido (turnos) do dia
    3. open_time/close_time do dia

Tudo em horário local do negócio; nenhum fuso é convertido aqui.

Obs: o cálculo não grava nada. Duas pessoas consultando ao mesmo tempo
podem ver o mesmo horário livre; quem resolve a disputa é o fluxo que
cria o agendamento.
"""

import logging
from collections import Counter
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Optional

from booking.config import ACTIVE_BOOKING_STATUSES
from booking.scheduling.exceptions import SlotConfigurationError
from booking.scheduling.types import (
    AvailabilityResult,
    AvailabilitySnapshot,
    AvailableSlot,
    DayScheduleWindow,
    OffDay,
    ServiceParameters,
    ServiceScheduleOverride,
    TimeRange,
    TimeSpan,
)

logger = logging.getLogger(__name__)

REASON_OFF_DAY = "off_day"
REASON_CLOSED = "closed"
REASON_INVALID_SERVICE = "invalid_service"


def day_of_week(d: date) -> int:
    """0=domingo ... 6=sábado (mesma convenção do widget de agendamento)."""
    return d.isoweekday() % 7


def format_display_time(t: time) -> str:
    """Formata em 12h: 9:00 AM, 2:30 PM."""
    hour = t.hour % 12 or 12
    suffix = "AM" if t.hour < 12 else "PM"
    return f"{hour}:{t.minute:02d} {suffix}"


def applicable_off_days(
    off_days: Iterable[OffDay],
    business_id: int,
    location_id: Optional[int] = None,
) -> List[date]:
    """Folgas gerais + folgas da unidade (quando há unidade), ordenadas."""
    dates = {
        off.off_date
        for off in off_days
        if off.business_id == business_id
        and (off.location_id is None or (location_id is not None and off.location_id == location_id))
    }
    return sorted(dates)


def resolve_day_window(
    windows: Iterable[DayScheduleWindow],
    business_id: int,
    weekday: int,
    location_id: Optional[int] = None,
) -> Optional[DayScheduleWindow]:
    """
    Escolhe a linha de expediente do dia.

    Com unidade: a linha da unidade, se existir; senão a linha geral.
    Sem unidade: só a linha geral.
    """
    general = None
    for window in windows:
        if window.business_id != business_id or window.day_of_week != weekday:
            continue
        if location_id is not None and window.location_id == location_id:
            return window
        if window.location_id is None and general is None:
            general = window
    return general


def _as_ranges(spans: Iterable[TimeSpan], where: str) -> List[TimeRange]:
    ranges = []
    for span in spans:
        try:
            ranges.append(TimeRange(start_time=span.start_time, end_time=span.end_time))
        except ValueError:
            raise SlotConfigurationError(
                f"Intervalo inválido {span.start_time}-{span.end_time} ({where})"
            ) from None
    return ranges


def resolve_effective_ranges(
    window: Optional[DayScheduleWindow],
    overrides: Iterable[ServiceScheduleOverride],
    service_id: int,
    weekday: int,
) -> List[TimeRange]:
    """
    Intervalos que valem para o serviço no dia.

    Dia sem linha ou fechado -> []. Depois: horário do serviço, turnos do
    dia, open/close, nessa ordem; o primeiro que existir ganha sozinho.
    Só os intervalos escolhidos são validados; erro de cadastro em outro
    dia da semana não afeta a consulta.
    """
    if window is None or window.is_closed:
        return []

    for override in overrides:
        if override.service_id == service_id and override.day_of_week == weekday and override.ranges:
            return _as_ranges(override.ranges, f"serviço {service_id}, dia {weekday}")

    if window.ranges:
        return _as_ranges(window.ranges, f"expediente do negócio {window.business_id}, dia {weekday}")

    if window.open_time is None or window.close_time is None:
        raise SlotConfigurationError(
            f"Dia {weekday} aberto sem open_time/close_time (negócio {window.business_id})"
        )
    return _as_ranges(
        [TimeSpan(start_time=window.open_time, end_time=window.close_time)],
        f"expediente do negócio {window.business_id}, dia {weekday}",
    )


def _check_ranges(ranges: List[TimeRange]):
    for i, a in enumerate(ranges):
        for b in ranges[i + 1:]:
            if a.overlaps(b):
                raise SlotConfigurationError(
                    f"Intervalos sobrepostos: {a.start_time}-{a.end_time} e {b.start_time}-{b.end_time}"
                )


def compute_available_slots(
    target_date: date,
    business_id: int,
    service_id: int,
    location_id: Optional[int],
    params: ServiceParameters,
    snapshot: AvailabilitySnapshot,
    now: Optional[datetime] = None,
) -> AvailabilityResult:
    """
    Gera os horários disponíveis para uma data.

    Args:
        target_date: data consultada
        business_id: negócio
        service_id: serviço a ser agendado
        location_id: unidade (opcional)
        params: duração, intervalo e capacidade do serviço
        snapshot: resultado das consultas (expediente, folgas, bloqueios...)
        now: "agora" no horário local do negócio (padrão: datetime.now())

    Returns:
        AvailabilityResult com os horários em ordem crescente.

    Raises:
        SlotConfigurationError: intervalo entre horários <= 0, capacidade < 1
            ou intervalos do dia sobrepostos.
    """
    if snapshot.is_loading:
        return AvailabilityResult(is_loading=True)

    off_days = applicable_off_days(snapshot.off_days, business_id, location_id)

    if params.duration_minutes <= 0:
        return AvailabilityResult(reason=REASON_INVALID_SERVICE, off_days=off_days)

    if target_date in off_days:
        return AvailabilityResult(reason=REASON_OFF_DAY, off_days=off_days)

    weekday = day_of_week(target_date)
    window = resolve_day_window(snapshot.business_hours, business_id, weekday, location_id)
    ranges = resolve_effective_ranges(window, snapshot.service_overrides, service_id, weekday)
    if not ranges:
        return AvailabilityResult(reason=REASON_CLOSED, off_days=off_days)
    _check_ranges(ranges)

    slot_interval = params.duration_minutes + params.buffer_minutes
    if slot_interval <= 0:
        raise SlotConfigurationError(
            f"Intervalo entre horários inválido ({slot_interval} min) no serviço {service_id}"
        )

    capacity = 1 if params.slot_capacity is None else params.slot_capacity
    if capacity < 1:
        raise SlotConfigurationError(f"Capacidade inválida ({capacity}) no serviço {service_id}")

    if now is None:
        now = datetime.now()

    duration = timedelta(minutes=params.duration_minutes)
    step = timedelta(minutes=slot_interval)

    blocked = {
        b.start_time.strftime("%H:%M")
        for b in snapshot.slot_blocks
        if b.business_id == business_id and b.service_id == service_id and b.blocked_date == target_date
    }

    booked = Counter(
        booking.start.strftime("%H:%M")
        for booking in snapshot.bookings
        if booking.service_id == service_id
        and booking.start.date() == target_date
        and booking.status in ACTIVE_BOOKING_STATUSES
    )

    candidates: List[datetime] = []

    for r in ranges:
        current = datetime.combine(target_date, r.start_time)
        end = datetime.combine(target_date, r.end_time)

        # só oferece o horário se o serviço inteiro cabe no intervalo
        while current + duration <= end:
            time_str = current.strftime("%H:%M")

            # bloqueado -> passado -> lotado
            if time_str not in blocked and current >= now and booked[time_str] < capacity:
                candidates.append(current)

            current += step

    candidates.sort()

    slots = [
        AvailableSlot(time=c.strftime("%H:%M"), label=format_display_time(c.time()))
        for c in candidates
    ]

    logger.debug(
        f"{len(slots)} horários para serviço {service_id} em {target_date.isoformat()} "
        f"({len(ranges)} intervalos, {len(blocked)} bloqueios)"
    )

    return AvailabilityResult(slots=slots, off_days=off_days)
