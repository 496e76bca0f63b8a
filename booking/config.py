import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# .env na raiz do projeto
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

logger = logging.getLogger(__name__)

# =========================
# BANCO
# =========================
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./booking.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# =========================
# TOKEN (emitido pelo provedor de autenticação externo)
# =========================
JWT_SECRET = os.getenv("JWT_SECRET")
if not JWT_SECRET:
    logger.warning("JWT_SECRET não definido! Usando segredo inseguro de desenvolvimento.")
    JWT_SECRET = "dev-secret-change-me"
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "authenticated")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# =========================
# LOGGING
# =========================
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# =========================
# AGENDA
# =========================
# só esses status ocupam vaga
ACTIVE_BOOKING_STATUSES = ("pending", "confirmed")
