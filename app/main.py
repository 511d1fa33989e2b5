# app/main.py
import uvicorn

from app.api import create_app
from app.data.database import Base, engine
from app.data.seed import seed
from app.utils.logging import get_logger

# IMPORT WSZYSTKICH MODELI NA POCZĄTKU (PRZED JAKIMKOLWIEK CREATE_ALL)
from app.data import models  # noqa: F401

logger = get_logger(__name__)


def init_db() -> None:
    logger.info(f"Models registered in Base.metadata: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")
    except Exception:
        logger.exception("Failed to create tables")
        raise

    created = seed()
    logger.info(f"Seeded {created} voucher(s)")


init_db()

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
