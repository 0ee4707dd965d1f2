import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name, default="false"):
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    MONGODB_URI  = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    MONGODB_DB   = os.getenv("MONGODB_DB", "budget_tracker")
    MONGODB_CONNECT_TIMEOUT_MS          = int(os.getenv("MONGODB_CONNECT_TIMEOUT_MS", 10000))
    MONGODB_SERVER_SELECTION_TIMEOUT_MS = int(os.getenv("MONGODB_SERVER_SELECTION_TIMEOUT_MS", 10000))
    MONGODB_MAX_POOL_SIZE = int(os.getenv("MONGODB_MAX_POOL_SIZE", 100))
    MONGODB_MIN_POOL_SIZE = int(os.getenv("MONGODB_MIN_POOL_SIZE", 10))
    INIT_TIMEOUT_SECONDS   = float(os.getenv("INIT_TIMEOUT_SECONDS", 30))
    INIT_SCHEMA_ON_STARTUP = _flag("INIT_SCHEMA_ON_STARTUP")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
