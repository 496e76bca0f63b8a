from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select

from booking.database import get_session
from booking.models.business import Business, BusinessCreate, Location, LocationCreate
from booking.core.security import get_current_business, get_current_user_id

router = APIRouter(prefix="/businesses", tags=["businesses"])


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_business(
    payload: BusinessCreate,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
):
    existing = session.exec(
        select(Business).where(Business.owner_id == user_id)
    ).first()

    if existing:
        raise HTTPException(status_code=400, detail="Usuário já possui um negócio")

    business = Business(name=payload.name, owner_id=user_id)

    session.add(business)
    session.commit()
    session.refresh(business)
    return business


@router.get("/me")
def my_business(current_business: Business = Depends(get_current_business)):
    return current_business


# =========================
# UNIDADES
# =========================
@router.post("/locations", status_code=status.HTTP_201_CREATED)
def create_location(
    payload: LocationCreate,
    session: Session = Depends(get_session),
    current_business: Business = Depends(get_current_business),
):
    location = Location(business_id=current_business.id, name=payload.name, address=payload.address)

    session.add(location)
    session.commit()
    session.refresh(location)
    return location


@router.get("/locations")
def list_locations(
    session: Session = Depends(get_session),
    current_business: Business = Depends(get_current_business),
):
    return session.exec(
        select(Location).where(Location.business_id == current_business.id)
    ).all()
