from datetime import time, datetime, timedelta
from sqlmodel import Session, select

from booking.core.security import create_access_token
from booking.database import create_db_and_tables, engine
from booking.models.business import Business
from booking.models.business_hours import BusinessHourRange, BusinessHours
from booking.models.off_day import OffDay
from booking.models.service import Service
from booking.models.service_schedule import ServiceSchedule
from booking.models.slot_block import SlotBlock


OWNER_ID = "dev-owner"


def main():
    create_db_and_tables()

    with Session(engine) as session:
        # 1) negócio do dono de desenvolvimento
        business = session.exec(select(Business).where(Business.owner_id == OWNER_ID)).first()
        if not business:
            business = Business(name="Studio Dev", owner_id=OWNER_ID)
            session.add(business)
            session.flush()

        # 2) expediente: seg-sex 09-12 e 14-18, sábado 09-13, domingo fechado
        split = [(time(9, 0), time(12, 0)), (time(14, 0), time(18, 0))]
        defaults = {
            0: dict(is_closed=True, open_time=None, close_time=None, ranges=[]),
            1: dict(is_closed=False, open_time=time(9, 0), close_time=time(18, 0), ranges=split),
            2: dict(is_closed=False, open_time=time(9, 0), close_time=time(18, 0), ranges=split),
            3: dict(is_closed=False, open_time=time(9, 0), close_time=time(18, 0), ranges=split),
            4: dict(is_closed=False, open_time=time(9, 0), close_time=time(18, 0), ranges=split),
            5: dict(is_closed=False, open_time=time(9, 0), close_time=time(18, 0), ranges=split),
            6: dict(is_closed=False, open_time=time(9, 0), close_time=time(13, 0), ranges=[]),
        }

        for weekday, cfg in defaults.items():
            row = session.exec(
                select(BusinessHours).where(
                    BusinessHours.business_id == business.id,
                    BusinessHours.weekday == weekday,
                    BusinessHours.location_id == None,  # noqa: E711
                )
            ).first()

            if not row:
                row = BusinessHours(business_id=business.id, weekday=weekday)
            row.is_closed = cfg["is_closed"]
            row.open_time = cfg["open_time"]
            row.close_time = cfg["close_time"]
            session.add(row)
            session.flush()

            old_ranges = session.exec(
                select(BusinessHourRange).where(BusinessHourRange.business_hours_id == row.id)
            ).all()
            for old in old_ranges:
                session.delete(old)
            for index, (start, end) in enumerate(cfg["ranges"]):
                session.add(BusinessHourRange(business_hours_id=row.id, start_time=start, end_time=end, display_order=index))

        # 3) serviços de teste (se não existir)
        existing_service = session.exec(
            select(Service).where(Service.business_id == business.id)
        ).first()

        if not existing_service:
            massage = Service(name="Massagem", duration_minutes=60, buffer_minutes=15, price=120.0, business_id=business.id)
            yoga = Service(name="Aula de Yoga", duration_minutes=45, slot_capacity=8, price=40.0, business_id=business.id)
            session.add_all([massage, yoga])
            session.flush()

            # yoga só às terças e quintas de manhã
            for weekday in (2, 4):
                session.add(ServiceSchedule(service_id=yoga.id, weekday=weekday, start_time=time(7, 0), end_time=time(9, 0)))

            # bloqueio de exemplo - amanhã 14:00 na massagem
            tomorrow = (datetime.now() + timedelta(days=1)).date()
            session.add(SlotBlock(business_id=business.id, service_id=massage.id, blocked_date=tomorrow, start_time=time(14, 0), reason="Teste"))

            # folga geral daqui a uma semana
            session.add(OffDay(business_id=business.id, off_date=tomorrow + timedelta(days=6), reason="Feriado"))

        session.commit()
        session.refresh(business)

        print("✅ Seed concluído!")
        print(f"Negócio: {business.id} ({business.name})")
        print("Horários: seg-sex 09-12 e 14-18; sábado 09-13; domingo fechado")
        print("Serviços: Massagem / Aula de Yoga (se não existiam)")
        print(f"Token do dono: {create_access_token({'sub': OWNER_ID})}")


if __name__ == "__main__":
    main()
