import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "standly_db"),
}

# Optional team code required on sign-in/sign-up (empty disables the check)
ACCESS_CODE = os.getenv("ACCESS_CODE", "")

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
PUBLIC_UPLOAD_URL = os.getenv("PUBLIC_UPLOAD_URL", "/uploads")
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_DRAFT_MODEL = os.getenv("GEMINI_DRAFT_MODEL", "gemini-2.5-flash")

VIRTUAL_OFFICE_URL = os.getenv("VIRTUAL_OFFICE_URL", "")
VIRTUAL_OFFICE_PASSWORD = os.getenv("VIRTUAL_OFFICE_PASSWORD", "")

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
