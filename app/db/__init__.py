# Database Layer

from app.db.models import (
    Base,
    CallDataRecordModel,
    SubscriberModel,
)
from app.db.session import (
    async_session_factory,
    close_db,
    engine,
    get_async_session,
    get_session_context,
    init_db,
)

__all__ = [
    # Models
    "Base",
    "CallDataRecordModel",
    "SubscriberModel",
    # Session utilities
    "engine",
    "async_session_factory",
    "get_async_session",
    "get_session_context",
    "init_db",
    "close_db",
]
