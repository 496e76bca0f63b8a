from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field


class Business(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    name: str

    # "sub" do token emitido pelo provedor de autenticação
    owner_id: str = Field(index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)


class Location(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    business_id: int = Field(foreign_key="business.id", index=True)

    name: str
    address: Optional[str] = None
    active: bool = True


class BusinessCreate(SQLModel):
    name: str


class LocationCreate(SQLModel):
    name: str
    address: Optional[str] = None
