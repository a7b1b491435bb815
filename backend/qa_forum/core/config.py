import os
from dotenv import load_dotenv

# Load .env from the backend directory
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "..", ".env"))

SECRET_KEY: str = os.getenv("SECRET_KEY", "lesson-qa-dev-secret-change-in-prod")
ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))  # 24h

# Database — stored in backend/data/
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
BACKEND_DIR = os.path.abspath(os.path.join(BASE_DIR, "..", ".."))

DATABASE_PATH: str = os.getenv(
    "DATABASE_PATH",
    os.path.join(BACKEND_DIR, "data", "qa.db"),
)

# "sqlite" (persistent) or "memory" (process-local, lost on restart)
STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "sqlite").lower()

# Seconds a writer waits on a locked database before giving up
SQLITE_TIMEOUT: float = float(os.getenv("SQLITE_TIMEOUT", "5"))

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
