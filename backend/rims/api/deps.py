"""Request-scoped dependencies shared by the route modules."""

from typing import Annotated

from fastapi import Depends

from rims.db.session import DbSession
from rims.services.inventory_store import InventoryStore
from rims.services.notifier import Notifier, inventory_notifier


def get_store(db: DbSession) -> InventoryStore:
    """Wrap the request's session in an inventory store."""
    return InventoryStore(db)


def get_notifier() -> Notifier:
    """Get the notifier processors publish inventory changes through."""
    return inventory_notifier


# Type aliases for dependency injection
Store = Annotated[InventoryStore, Depends(get_store)]
EventNotifier = Annotated[Notifier, Depends(get_notifier)]
