import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "standly"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "standly_db"),
}

ACCESS_CODE = os.getenv("ACCESS_CODE", "")

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "/var/lib/standly/uploads")
PUBLIC_UPLOAD_URL = os.getenv("PUBLIC_UPLOAD_URL", "/uploads")
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_DRAFT_MODEL = os.getenv("GEMINI_DRAFT_MODEL", "gemini-2.5-flash")

VIRTUAL_OFFICE_URL = os.getenv("VIRTUAL_OFFICE_URL", "")
VIRTUAL_OFFICE_PASSWORD = os.getenv("VIRTUAL_OFFICE_PASSWORD", "")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
