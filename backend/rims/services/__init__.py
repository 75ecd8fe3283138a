# Services module

from rims.services.inventory_store import InventoryStore
from rims.services.sale_processor import (
    IngredientRequirement,
    SaleOutcome,
    SaleProcessor,
    get_sale_processor,
)
from rims.services.waste_processor import WasteProcessor
from rims.services.reporting_service import (
    ReportingService,
    classify_stock,
    servings_possible,
)
from rims.services.notifier import (
    ConnectionManager,
    Notifier,
    WebSocketNotifier,
    inventory_notifier,
    manager,
    publish_inventory_update,
)

__all__ = [
    "InventoryStore",
    "IngredientRequirement",
    "SaleOutcome",
    "SaleProcessor",
    "get_sale_processor",
    "WasteProcessor",
    "ReportingService",
    "classify_stock",
    "servings_possible",
    "ConnectionManager",
    "Notifier",
    "WebSocketNotifier",
    "inventory_notifier",
    "manager",
    "publish_inventory_update",
]
