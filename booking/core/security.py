import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlmodel import Session, select

from booking import config
from booking.database import get_session
from booking.models.business import Business

logger = logging.getLogger(__name__)


# =========================
# TOKEN JWT
# (emitido pelo provedor de autenticação; aqui só validamos)
# =========================

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    """Gera um token no mesmo formato do provedor (uso em dev/seed)."""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    if config.JWT_AUDIENCE:
        to_encode.setdefault("aud", config.JWT_AUDIENCE)

    return jwt.encode(to_encode, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    return jwt.decode(
        token,
        config.JWT_SECRET,
        algorithms=[config.JWT_ALGORITHM],
        audience=config.JWT_AUDIENCE or None,
        options={"verify_aud": bool(config.JWT_AUDIENCE)},
    )


# =========================
# USUÁRIO AUTENTICADO
# =========================

def get_current_user_id(token: str = Depends(oauth2_scheme)) -> str:

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Não foi possível validar as credenciais",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_access_token(token)
        user_id: str = payload.get("sub")

        if user_id is None:
            raise credentials_exception

    except JWTError as e:
        logger.info(f"Token rejeitado: {e}")
        raise credentials_exception

    return user_id


# =========================
# SOMENTE DONO DE NEGÓCIO
# =========================

def get_current_business(
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
) -> Business:

    business = session.exec(
        select(Business).where(Business.owner_id == user_id).order_by(Business.id)
    ).first()

    if business is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Apenas donos de negócio podem acessar esta rota",
        )

    return business
