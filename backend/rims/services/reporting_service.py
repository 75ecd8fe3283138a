"""Reporting Service - read-only aggregations over the inventory store.

Every figure is computed at full precision; rounding happens only when a
value is placed in the response (4 places for quantities derived from a
deduction, 2 for currency).
"""

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from rims.core.exceptions import ValidationError
from rims.services.deduction import CURRENCY_PRECISION, DEDUCTION_PRECISION, actual_deduction
from rims.services.inventory_store import InventoryStore

logger = logging.getLogger(__name__)

STATUS_CRITICAL = "CRITICAL"
STATUS_LOW = "LOW"
STATUS_OK = "OK"

# Beyond this a float no longer tells n from n + 1
EXACT_FLOAT_LIMIT = 2 ** 53


def classify_stock(current_stock: float, par_level: float) -> str:
    """CRITICAL when empty (or negative after waste), LOW below par, else OK."""
    if current_stock <= 0:
        return STATUS_CRITICAL
    if current_stock < par_level:
        return STATUS_LOW
    return STATUS_OK


def servings_possible(current_stock: float, per_unit: float) -> Optional[int]:
    """How many units the stock covers, or None when the ingredient never runs out.

    Agrees with the sale check (stock >= per_unit * n) rather than trusting the
    floor of a float division.
    """
    if per_unit <= 0:
        return None
    if current_stock <= 0:
        return 0
    ratio = current_stock / per_unit
    if not math.isfinite(ratio):
        return None
    servings = math.floor(ratio)
    if servings >= EXACT_FLOAT_LIMIT:
        return servings
    while servings > 0 and per_unit * servings > current_stock:
        servings -= 1
    while servings < EXACT_FLOAT_LIMIT and per_unit * (servings + 1) <= current_stock:
        servings += 1
    return servings


def _window(days: int, now: Optional[datetime]) -> Dict[str, datetime]:
    if isinstance(days, bool) or not isinstance(days, int) or days < 1:
        raise ValidationError(f"Report window must be a positive number of days, got {days!r}")
    end = now or datetime.now(timezone.utc)
    return {"from": end - timedelta(days=days), "to": end}


class ReportingService:
    """Inventory, sales and waste reports."""

    def __init__(self, store: InventoryStore):
        self.store = store

    # ===== INVENTORY =====

    def inventory_summary(self) -> List[Dict[str, Any]]:
        """Every ingredient with its stock status."""
        return [
            {
                "id": ingredient.id,
                "name": ingredient.name,
                "currentStock": ingredient.current_stock,
                "parLevel": ingredient.par_level,
                "unit": ingredient.unit,
                "unitCost": ingredient.unit_cost,
                "status": classify_stock(ingredient.current_stock, ingredient.par_level),
            }
            for ingredient in self.store.list_ingredients()
        ]

    def purchase_orders(self) -> List[Dict[str, Any]]:
        """Restock proposals for depleted ingredients, targeting twice the par level."""
        orders = []
        for ingredient in self.store.list_depleted_ingredients():
            order_quantity = 2 * ingredient.par_level - ingredient.current_stock
            orders.append({
                "ingredientId": ingredient.id,
                "name": ingredient.name,
                "currentStock": ingredient.current_stock,
                "parLevel": ingredient.par_level,
                "orderQuantity": round(order_quantity, DEDUCTION_PRECISION),
                "unit": ingredient.unit,
                "unitCost": ingredient.unit_cost,
                "estimatedCost": round(order_quantity * ingredient.unit_cost, CURRENCY_PRECISION),
            })
        return orders

    # ===== MENU ITEMS =====

    def menu_item_details(self, menu_item_id: int) -> Dict[str, Any]:
        """Menu item with per-ingredient consumption, ingredient cost and margin."""
        menu_item = self.store.get_menu_item_with_recipe(menu_item_id)

        ingredient_cost = 0.0
        recipes = []
        for recipe_item in menu_item.recipe_items:
            ingredient = recipe_item.ingredient
            per_unit = actual_deduction(recipe_item.quantity_required, recipe_item.yield_factor)
            cost = per_unit * ingredient.unit_cost
            ingredient_cost += cost
            recipes.append({
                "recipeItemId": recipe_item.id,
                "ingredientId": ingredient.id,
                "ingredient": ingredient.name,
                "quantityRequired": recipe_item.quantity_required,
                "unit": ingredient.unit,
                "yieldFactor": recipe_item.yield_factor,
                "actualDeduction": round(per_unit, DEDUCTION_PRECISION),
                "unitCost": ingredient.unit_cost,
                "cost": round(cost, CURRENCY_PRECISION),
            })

        profit_margin = None
        if menu_item.base_price > 0:
            profit_margin = round(
                (menu_item.base_price - ingredient_cost) / menu_item.base_price * 100,
                CURRENCY_PRECISION,
            )

        return {
            "id": menu_item.id,
            "name": menu_item.name,
            "basePrice": menu_item.base_price,
            "ingredientCost": round(ingredient_cost, CURRENCY_PRECISION),
            "profitMargin": profit_margin,
            "recipes": recipes,
        }

    def stock_deductions(self, menu_item_id: int) -> Dict[str, Any]:
        """What one unit of a menu item consumes and how many units stock allows."""
        menu_item = self.store.get_menu_item_with_recipe(menu_item_id)

        deductions = []
        bounded: List[int] = []
        total_cost = 0.0
        for recipe_item in menu_item.recipe_items:
            ingredient = recipe_item.ingredient
            per_unit = actual_deduction(recipe_item.quantity_required, recipe_item.yield_factor)
            can_make = servings_possible(ingredient.current_stock, per_unit)
            if can_make is not None:
                bounded.append(can_make)
            cost_per_unit = per_unit * ingredient.unit_cost
            total_cost += cost_per_unit
            deductions.append({
                "ingredientId": ingredient.id,
                "ingredient": ingredient.name,
                "unit": ingredient.unit,
                "quantityRequired": recipe_item.quantity_required,
                "yieldFactor": recipe_item.yield_factor,
                "actualDeduction": round(per_unit, DEDUCTION_PRECISION),
                "currentStock": ingredient.current_stock,
                "canMake": can_make,
                "costPerUnit": round(cost_per_unit, CURRENCY_PRECISION),
            })

        return {
            "menuItemId": menu_item.id,
            "menuItem": menu_item.name,
            "basePrice": menu_item.base_price,
            "deductions": deductions,
            "maxServings": min(bounded) if bounded else 0,
            "totalIngredientCost": round(total_cost, CURRENCY_PRECISION),
        }

    # ===== SALES =====

    def sales_report(self, days: int = 7, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Units and revenue per menu item over the last ``days`` days.

        Revenue uses each menu item's current base price, not the price at
        the time of sale.
        """
        window = _window(days, now)
        sales = self.store.list_sales(since=window["from"])

        summary: Dict[str, Dict[str, Any]] = {}
        for sale in sales:
            name = sale.menu_item.name
            if name not in summary:
                summary[name] = {"menuItemId": sale.menu_item_id, "name": name, "quantity": 0, "revenue": 0.0}
            summary[name]["quantity"] += sale.quantity_sold
            summary[name]["revenue"] += sale.quantity_sold * sale.menu_item.base_price

        rows = list(summary.values())
        total_revenue = sum(row["revenue"] for row in rows)
        for row in rows:
            row["revenue"] = round(row["revenue"], CURRENCY_PRECISION)

        return {
            "period": f"Last {days} days",
            "totalSales": len(sales),
            "totalQuantity": sum(row["quantity"] for row in rows),
            "totalRevenue": round(total_revenue, CURRENCY_PRECISION),
            "dateRange": {"from": window["from"].isoformat(), "to": window["to"].isoformat()},
            "summary": rows,
        }

    # ===== WASTE =====

    def waste_summary(self, days: int = 30, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Waste over the last ``days`` days, by ingredient and by reason."""
        window = _window(days, now)
        logs = self.store.list_waste_logs(since=window["from"])

        by_ingredient: Dict[int, Dict[str, Any]] = {}
        by_reason: Dict[str, Dict[str, Any]] = {}
        for log in logs:
            ingredient = log.ingredient
            entry = by_ingredient.setdefault(ingredient.id, {
                "ingredientId": ingredient.id,
                "name": ingredient.name,
                "unit": ingredient.unit,
                "totalQuantity": 0.0,
                "totalCost": 0.0,
                "totalEntries": 0,
            })
            entry["totalQuantity"] += log.quantity
            entry["totalCost"] += log.quantity * ingredient.unit_cost
            entry["totalEntries"] += 1

            reason = by_reason.setdefault(log.reason, {
                "reason": log.reason,
                "totalEntries": 0,
                "totalQuantity": 0.0,
            })
            reason["totalEntries"] += 1
            reason["totalQuantity"] += log.quantity

        total_cost = sum(entry["totalCost"] for entry in by_ingredient.values())
        for entry in by_ingredient.values():
            entry["totalQuantity"] = round(entry["totalQuantity"], DEDUCTION_PRECISION)
            entry["totalCost"] = round(entry["totalCost"], CURRENCY_PRECISION)
        for reason in by_reason.values():
            reason["totalQuantity"] = round(reason["totalQuantity"], DEDUCTION_PRECISION)

        return {
            "period": f"Last {days} days",
            "totalEntries": len(logs),
            "totalCost": round(total_cost, CURRENCY_PRECISION),
            "dateRange": {"from": window["from"].isoformat(), "to": window["to"].isoformat()},
            "byIngredient": list(by_ingredient.values()),
            "byReason": list(by_reason.values()),
        }
