"""Tests for waste logging."""

import pytest

from rims.core.exceptions import NotFoundError, ValidationError
from rims.services.waste_processor import WasteProcessor


@pytest.fixture
def oil(store):
    with store.transaction():
        ingredient = store.add_ingredient(
            name="Fryer Oil", unit="ml", current_stock=200, par_level=500, unit_cost=0.004,
        )
    return ingredient.id


class TestLogWaste:

    def test_spill_decrements_stock_and_records_log(self, store, oil):
        """Scenario D: 50 spilled out of 200 leaves 150."""
        waste_log = WasteProcessor(store).log_waste(oil, 50, "Spilled")

        assert store.get_ingredient(oil).current_stock == 150
        logs = store.list_waste_logs()
        assert len(logs) == 1
        assert logs[0].id == waste_log.id
        assert logs[0].quantity == 50
        assert logs[0].reason == "Spilled"

    def test_waste_can_drive_stock_negative(self, store, oil):
        WasteProcessor(store).log_waste(oil, 350, "Dropped container")

        assert store.get_ingredient(oil).current_stock == -150

    def test_clamp_stops_at_zero(self, store, oil):
        WasteProcessor(store, clamp_at_zero=True).log_waste(oil, 350, "Dropped container")

        assert store.get_ingredient(oil).current_stock == 0
        assert store.list_waste_logs()[0].quantity == 350

    def test_reason_is_trimmed(self, store, oil):
        waste_log = WasteProcessor(store).log_waste(oil, 5, "  Expired  ")
        assert waste_log.reason == "Expired"

    @pytest.mark.parametrize("quantity", [0, -5, float("nan"), float("inf"), "5", None, True])
    def test_quantity_must_be_positive(self, store, oil, quantity):
        with pytest.raises(ValidationError):
            WasteProcessor(store).log_waste(oil, quantity, "Spilled")
        assert store.get_ingredient(oil).current_stock == 200
        assert store.list_waste_logs() == []

    @pytest.mark.parametrize("reason", ["", "   ", None])
    def test_reason_is_required(self, store, oil, reason):
        with pytest.raises(ValidationError):
            WasteProcessor(store).log_waste(oil, 5, reason)
        assert store.list_waste_logs() == []

    def test_unknown_ingredient(self, store):
        with pytest.raises(NotFoundError):
            WasteProcessor(store).log_waste(404, 5, "Spilled")
        assert store.list_waste_logs() == []

    def test_publishes_inventory_update(self, store, oil, notifier):
        WasteProcessor(store, notifier).log_waste(oil, 50, "Spilled")

        event, data = notifier.events[0]
        assert event == "inventory_update"
        assert data["reason"] == "waste"
        assert data["items"][0]["currentStock"] == 150
        assert data["items"][0]["status"] == "LOW"

    def test_notifier_failure_keeps_committed_waste(self, store, oil, failing_notifier):
        WasteProcessor(store, failing_notifier).log_waste(oil, 50, "Spilled")

        assert store.get_ingredient(oil).current_stock == 150
        assert len(store.list_waste_logs()) == 1


class TestDeleteWasteLog:

    def test_delete_does_not_restore_stock(self, store, oil):
        processor = WasteProcessor(store)
        waste_log = processor.log_waste(oil, 50, "Spilled")

        processor.delete_waste_log(waste_log.id)

        assert store.list_waste_logs() == []
        assert store.get_ingredient(oil).current_stock == 150

    def test_delete_unknown_log(self, store):
        with pytest.raises(NotFoundError):
            WasteProcessor(store).delete_waste_log(12345)
