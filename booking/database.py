import logging

from sqlmodel import Session, SQLModel, create_engine

from booking.config import DATABASE_URL, SQL_ECHO

logger = logging.getLogger(__name__)

# sqlite precisa disso para ser usado pelas threads do FastAPI
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, echo=SQL_ECHO, connect_args=connect_args, pool_pre_ping=True)


def create_db_and_tables():
    # importa os models para registrar as tabelas no metadata
    from booking.models import (  # noqa: F401
        appointment,
        business,
        business_hours,
        off_day,
        service,
        service_schedule,
        slot_block,
    )

    SQLModel.metadata.create_all(engine)
    logger.info("Tabelas do banco prontas")


def get_session():
    with Session(engine) as session:
        yield session
