from typing import Optional
from sqlmodel import SQLModel, Field


class Service(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    name: str
    duration_minutes: int
    # tempo morto depois de cada horário
    buffer_minutes: int = 0
    # agendamentos simultâneos no mesmo horário (aulas/turmas)
    slot_capacity: int = 1
    price: float = 0.0

    status: str = Field(default="active", index=True)
    # active | inactive

    business_id: int = Field(foreign_key="business.id", index=True)


class ServiceCreate(SQLModel):
    name: str
    duration_minutes: int
    buffer_minutes: int = 0
    slot_capacity: int = 1
    price: float = 0.0
