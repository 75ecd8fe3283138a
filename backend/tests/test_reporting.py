"""Tests for inventory, menu, sales and waste reports."""

from datetime import datetime, timedelta, timezone

import pytest

from rims.core.exceptions import NotFoundError, ValidationError
from rims.services.reporting_service import ReportingService
from rims.services.sale_processor import SaleProcessor
from rims.services.waste_processor import WasteProcessor


@pytest.fixture
def reporting(store):
    return ReportingService(store)


class TestInventorySummary:

    def test_classifies_each_ingredient(self, store, reporting):
        with store.transaction():
            store.add_ingredient(name="Salt", unit="grams", current_stock=0, par_level=100, unit_cost=0.001)
            store.add_ingredient(name="Pepper", unit="grams", current_stock=40, par_level=100, unit_cost=0.01)
            store.add_ingredient(name="Rice", unit="grams", current_stock=100, par_level=100, unit_cost=0.003)

        statuses = {row["name"]: row["status"] for row in reporting.inventory_summary()}

        assert statuses == {"Salt": "CRITICAL", "Pepper": "LOW", "Rice": "OK"}

    def test_negative_stock_after_waste_is_critical(self, store, reporting):
        with store.transaction():
            milk = store.add_ingredient(name="Milk", unit="ml", current_stock=100, par_level=500, unit_cost=0.001)
        WasteProcessor(store).log_waste(milk.id, 300, "Spoiled")

        row = reporting.inventory_summary()[0]
        assert row["currentStock"] == -200
        assert row["status"] == "CRITICAL"

    def test_row_shape(self, burger_catalog, reporting):
        row = next(r for r in reporting.inventory_summary() if r["name"] == "Bun")
        assert row == {
            "id": burger_catalog["Bun"],
            "name": "Bun",
            "currentStock": 200,
            "parLevel": 50,
            "unit": "pieces",
            "unitCost": 0.5,
            "status": "OK",
        }


class TestMenuItemDetails:

    def test_burger_cost_and_margin(self, burger_catalog, reporting):
        details = reporting.menu_item_details(burger_catalog["menu_item"])

        assert details["name"] == "Burger"
        assert details["basePrice"] == 12.99
        assert details["ingredientCost"] == 15.88
        assert details["profitMargin"] == -22.24
        beef = details["recipes"][0]
        assert beef["ingredient"] == "Beef"
        assert beef["actualDeduction"] == 181.8182
        assert beef["yieldFactor"] == 1.1

    def test_zero_price_has_no_margin(self, make_catalog, reporting):
        ids = make_catalog(
            ingredients=[{"name": "Water", "unit": "ml", "current_stock": 1000, "par_level": 0, "unit_cost": 0.0}],
            menu_item={"name": "Tap Water", "base_price": 0.0},
            recipe=[("Water", 250, 1.0)],
        )
        assert reporting.menu_item_details(ids["menu_item"])["profitMargin"] is None

    def test_unknown_menu_item(self, reporting):
        with pytest.raises(NotFoundError):
            reporting.menu_item_details(42)


class TestStockDeductions:

    def test_burger_projection(self, burger_catalog, reporting):
        projection = reporting.stock_deductions(burger_catalog["menu_item"])

        assert projection["menuItem"] == "Burger"
        assert projection["basePrice"] == 12.99
        rows = {row["ingredient"]: row for row in projection["deductions"]}
        assert rows["Beef"]["actualDeduction"] == 181.8182
        assert rows["Beef"]["canMake"] == 27
        assert rows["Beef"]["costPerUnit"] == 14.55
        assert rows["Bun"]["canMake"] == 200
        assert rows["Lettuce"]["actualDeduction"] == 41.6667
        assert projection["maxServings"] == 27
        assert projection["totalIngredientCost"] == 15.88

    def test_depleted_ingredient_makes_nothing(self, make_catalog, reporting):
        ids = make_catalog(
            ingredients=[
                {"name": "Dough", "unit": "grams", "current_stock": 2000, "par_level": 500, "unit_cost": 0.002},
                {"name": "Sauce", "unit": "ml", "current_stock": 0, "par_level": 200, "unit_cost": 0.01},
            ],
            menu_item={"name": "Pizza", "base_price": 11.0},
            recipe=[("Dough", 250, 1.0), ("Sauce", 80, 1.0)],
        )

        projection = reporting.stock_deductions(ids["menu_item"])

        assert projection["maxServings"] == 0

    def test_menu_item_without_recipe(self, store, reporting):
        with store.transaction():
            item = store.add_menu_item(name="Gift Card", base_price=25.0)

        projection = reporting.stock_deductions(item.id)

        assert projection["deductions"] == []
        assert projection["maxServings"] == 0
        assert projection["totalIngredientCost"] == 0

    def test_projection_agrees_with_sale_check(self, burger_catalog, store, reporting):
        max_servings = reporting.stock_deductions(burger_catalog["menu_item"])["maxServings"]

        SaleProcessor(store).process_sale(burger_catalog["menu_item"], max_servings)

        assert reporting.stock_deductions(burger_catalog["menu_item"])["maxServings"] == 0

    def test_unknown_menu_item(self, reporting):
        with pytest.raises(NotFoundError):
            reporting.stock_deductions(42)


class TestPurchaseOrders:

    def test_orders_only_depleted_ingredients(self, store, reporting):
        with store.transaction():
            store.add_ingredient(name="Bun", unit="pieces", current_stock=0, par_level=50, unit_cost=0.5)
            oil = store.add_ingredient(name="Oil", unit="ml", current_stock=100, par_level=500, unit_cost=0.004)
            store.add_ingredient(name="Rice", unit="grams", current_stock=10, par_level=100, unit_cost=0.003)
        WasteProcessor(store).log_waste(oil.id, 250, "Spilled")

        orders = {order["name"]: order for order in reporting.purchase_orders()}

        assert set(orders) == {"Bun", "Oil"}
        assert orders["Bun"]["orderQuantity"] == 100
        assert orders["Bun"]["estimatedCost"] == 50.0
        assert orders["Oil"]["currentStock"] == -150
        assert orders["Oil"]["orderQuantity"] == 1150
        assert orders["Oil"]["estimatedCost"] == 4.6

    def test_nothing_to_order(self, burger_catalog, reporting):
        assert reporting.purchase_orders() == []


class TestSalesReport:

    def test_window_and_revenue(self, burger_catalog, store, reporting):
        now = datetime.now(timezone.utc)
        with store.transaction():
            store.add_sale(burger_catalog["menu_item"], 3, created_at=now - timedelta(days=1))
            store.add_sale(burger_catalog["menu_item"], 2, created_at=now - timedelta(days=6))
            store.add_sale(burger_catalog["menu_item"], 7, created_at=now - timedelta(days=10))

        report = reporting.sales_report(7, now=now)

        assert report["period"] == "Last 7 days"
        assert report["totalSales"] == 2
        assert report["summary"] == [
            {"menuItemId": burger_catalog["menu_item"], "name": "Burger", "quantity": 5, "revenue": 64.95}
        ]
        assert report["dateRange"]["to"] == now.isoformat()

    def test_revenue_uses_current_price(self, burger_catalog, store, reporting):
        SaleProcessor(store).process_sale(burger_catalog["menu_item"], 4)
        with store.transaction():
            store.update_menu_item(burger_catalog["menu_item"], {"base_price": 10.0})

        report = reporting.sales_report(7)

        assert report["summary"][0]["revenue"] == 40.0
        assert report["totalRevenue"] == 40.0

    def test_empty_window(self, burger_catalog, reporting):
        report = reporting.sales_report(1)
        assert report["totalSales"] == 0
        assert report["summary"] == []

    @pytest.mark.parametrize("days", [0, -7, 1.5])
    def test_invalid_window(self, reporting, days):
        with pytest.raises(ValidationError):
            reporting.sales_report(days)


class TestWasteSummary:

    def test_groups_by_ingredient_and_reason(self, burger_catalog, store, reporting):
        processor = WasteProcessor(store)
        processor.log_waste(burger_catalog["Beef"], 100, "Spilled")
        processor.log_waste(burger_catalog["Lettuce"], 50, "Spilled")
        processor.log_waste(burger_catalog["Lettuce"], 20, "Expired")

        summary = reporting.waste_summary(30)

        assert summary["period"] == "Last 30 days"
        assert summary["totalEntries"] == 3
        by_ingredient = {row["name"]: row for row in summary["byIngredient"]}
        assert by_ingredient["Lettuce"]["totalQuantity"] == 70
        assert by_ingredient["Lettuce"]["totalEntries"] == 2
        assert by_ingredient["Lettuce"]["totalCost"] == 1.4
        assert by_ingredient["Beef"]["totalCost"] == 8.0
        by_reason = {row["reason"]: row for row in summary["byReason"]}
        assert by_reason["Spilled"] == {"reason": "Spilled", "totalEntries": 2, "totalQuantity": 150}
        assert by_reason["Expired"]["totalEntries"] == 1

    def test_old_waste_is_excluded(self, burger_catalog, store, reporting):
        now = datetime.now(timezone.utc)
        with store.transaction():
            store.add_waste_log(burger_catalog["Bun"], 4, "Stale", created_at=now - timedelta(days=45))

        summary = reporting.waste_summary(30, now=now)

        assert summary["totalEntries"] == 0
        assert summary["byIngredient"] == []
