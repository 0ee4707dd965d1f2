import logging
from contextlib import contextmanager

from pymongo import MongoClient
from config import Config

logger = logging.getLogger(__name__)


def make_client(cfg=Config):
    """Build a MongoClient from config. Connecting is lazy; nothing is sent yet."""
    return MongoClient(
        cfg.MONGODB_URI,
        connectTimeoutMS=cfg.MONGODB_CONNECT_TIMEOUT_MS,
        serverSelectionTimeoutMS=cfg.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
        maxPoolSize=cfg.MONGODB_MAX_POOL_SIZE,
        minPoolSize=cfg.MONGODB_MIN_POOL_SIZE,
        retryWrites=True,
        retryReads=True,
    )


@contextmanager
def open_database(cfg=Config, client=None):
    """
    Scoped database handle.
    - pings the server before handing the database out
    - closes the client on exit, unless the caller supplied its own client
    """
    owned = client is None
    if owned:
        client = make_client(cfg)
    try:
        client.admin.command("ping")
        logger.info("Connected to MongoDB database %s", cfg.MONGODB_DB)
        yield client[cfg.MONGODB_DB]
    finally:
        if owned:
            client.close()
