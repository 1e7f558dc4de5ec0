import os

import pytz
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./campus_parking.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

CAMPUS_TIMEZONE = pytz.timezone(os.getenv("CAMPUS_TIMEZONE", "Asia/Kuala_Lumpur"))

PROOF_CODE_LENGTH = int(os.getenv("PROOF_CODE_LENGTH", 8))
PROOF_CODE_MAX_ATTEMPTS = int(os.getenv("PROOF_CODE_MAX_ATTEMPTS", 5))

DEFAULT_ADMIN_USERNAME = os.getenv("DEFAULT_ADMIN_USERNAME", "admin")
DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "changeme123")
DEFAULT_ADMIN_EMAIL = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@campus.edu")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
