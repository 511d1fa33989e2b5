# app/api/deps.py
from functools import lru_cache

from app.services.lock_service import LockService


@lru_cache
def get_lock_service() -> LockService:
    # jeden klient redis (pula polaczen) na proces
    return LockService()
