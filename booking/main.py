from fastapi import FastAPI

from booking.config import LOG_LEVEL
from booking.core.logging import setup_logging
from booking.database import create_db_and_tables
from booking.routers import availability
from booking.routers import businesses
from booking.routers import services
from booking.routers import business_hours, off_days, slot_blocks

setup_logging(LOG_LEVEL)

app = FastAPI()
app.include_router(availability.router)
app.include_router(businesses.router)
app.include_router(services.router)
app.include_router(business_hours.router)
app.include_router(slot_blocks.router)
app.include_router(off_days.router)


@app.on_event("startup")
def on_startup():
    create_db_and_tables()

@app.get("/")
def root():
    return {"message": "API de agendamento funcionando 🚀"}
