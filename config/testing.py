import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "standly_test"),
}

ACCESS_CODE = ""

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "/tmp/standly-test-uploads")
PUBLIC_UPLOAD_URL = "/uploads"
MAX_UPLOAD_BYTES = 1024 * 1024

GEMINI_API_KEY = ""
GEMINI_MODEL = "gemini-2.5-flash"
GEMINI_DRAFT_MODEL = "gemini-2.5-flash"

VIRTUAL_OFFICE_URL = "https://office.example.test/play"
VIRTUAL_OFFICE_PASSWORD = "test-pass"

LOG_LEVEL = "WARNING"
DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
