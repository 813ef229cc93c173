"""
Tests for the order reconciler.

Covers the per-item classification rules, the conditional-update demotion,
order persistence and the request-level failures.
"""

import pytest

from catalog_service.core.exceptions import (
    InvalidInputError,
    NoFulfillmentError,
    RepositoryError,
    StoreUnavailableError,
)
from catalog_service.domain.models.order import ReconciliationRequest, UnfulfilledReason
from catalog_service.domain.models.product import Product
from catalog_service.services.order_reconciler import (
    FULFILLED,
    PARTIAL,
    OrderReconciler,
    plan_adjustment,
)


@pytest.fixture
def reconciler(product_store, order_store):
    return OrderReconciler(product_store, order_store)


# =============================================================================
# plan_adjustment
# =============================================================================


class TestPlanAdjustment:

    def test_outgoing_with_enough_stock(self):
        plan = plan_adjustment(Product(name="a", price=1, inventory=5), 3, True)
        assert plan.outcome == FULFILLED
        assert (plan.expected, plan.updated, plan.applied) == (5, 2, 3)

    def test_outgoing_exact_stock(self):
        plan = plan_adjustment(Product(name="a", price=1, inventory=5), 5, True)
        assert plan.outcome == FULFILLED
        assert plan.updated == 0

    def test_outgoing_short_stock_consumes_everything(self):
        plan = plan_adjustment(Product(name="a", price=1, inventory=5), 8, True)
        assert plan.outcome == PARTIAL
        assert (plan.expected, plan.updated, plan.applied) == (5, 0, 5)

    def test_outgoing_no_stock(self):
        assert plan_adjustment(Product(name="a", price=1, inventory=0), 1, True) is None

    def test_incoming_has_no_upper_bound(self):
        plan = plan_adjustment(Product(name="a", price=1, inventory=5), 1000, False)
        assert plan.outcome == FULFILLED
        assert (plan.expected, plan.updated, plan.applied) == (5, 1005, 1000)

    def test_incoming_into_empty_stock(self):
        plan = plan_adjustment(Product(name="a", price=1, inventory=0), 4, False)
        assert plan.outcome == FULFILLED
        assert plan.updated == 4


# =============================================================================
# Outgoing orders
# =============================================================================


class TestOutgoing:

    def test_fulfilled_scenario(self, reconciler, product_store, order_store):
        """Inventory 5, request 3 -> inventory 2, fulfilled, detail {P1: 3}."""
        product_store.add("widget", inventory=5, product_id="P1")

        result = reconciler.reconcile(True, {"P1": 3})

        assert product_store.inventory_of("P1") == 2
        assert result.fulfilled == ["P1"]
        assert result.partial == []
        assert result.unfulfilled == []
        assert [item.to_dict() for item in result.order.line_items] == [{"P1": 3}]
        assert result.order_id in order_store.orders

    def test_partial_scenario(self, reconciler, product_store):
        """Inventory 5, request 8 -> inventory 0, partial, detail {P1: 5}."""
        product_store.add("widget", inventory=5, product_id="P1")

        result = reconciler.reconcile(True, {"P1": 8})

        assert product_store.inventory_of("P1") == 0
        assert result.partial == ["P1"]
        assert result.fulfilled == []
        assert [item.to_dict() for item in result.order.line_items] == [{"P1": 5}]

    def test_out_of_stock_is_unfulfilled_and_untouched(self, reconciler, product_store):
        product_store.add("empty", inventory=0, product_id="P0")
        product_store.add("full", inventory=3, product_id="P1")

        result = reconciler.reconcile(True, {"P0": 2, "P1": 1})

        assert result.unfulfilled == ["P0"]
        assert result.reasons["P0"] == UnfulfilledReason.OUT_OF_STOCK
        assert product_store.inventory_of("P0") == 0
        assert ("P0", 0, 0) not in product_store.adjust_calls

    def test_mixed_outcomes_partition_the_request(self, reconciler, product_store):
        product_store.add("a", inventory=10, product_id="A")
        product_store.add("b", inventory=2, product_id="B")
        product_store.add("c", inventory=0, product_id="C")

        requested = {"A": 4, "B": 5, "C": 1, "MISSING": 1}
        result = reconciler.reconcile(True, requested)

        assert result.fulfilled == ["A"]
        assert result.partial == ["B"]
        assert result.unfulfilled == ["C", "MISSING"]
        buckets = result.fulfilled + result.partial + result.unfulfilled
        assert sorted(buckets) == sorted(requested)
        assert len(buckets) == len(set(buckets))

    def test_line_items_follow_request_order(self, reconciler, product_store):
        product_store.add("a", inventory=10, product_id="A")
        product_store.add("b", inventory=10, product_id="B")
        product_store.add("c", inventory=10, product_id="C")

        result = reconciler.reconcile(True, {"C": 1, "A": 2, "B": 3})

        assert [item.product_id for item in result.order.line_items] == ["C", "A", "B"]

    def test_line_items_exclude_unfulfilled(self, reconciler, product_store):
        product_store.add("a", inventory=10, product_id="A")
        product_store.add("b", inventory=1, product_id="B")

        result = reconciler.reconcile(True, {"A": 3, "MISSING": 4, "B": 6})

        assert [item.to_dict() for item in result.order.line_items] == [{"A": 3}, {"B": 1}]


# =============================================================================
# Incoming orders
# =============================================================================


class TestIncoming:

    def test_restock_increases_inventory(self, reconciler, product_store):
        product_store.add("widget", inventory=5, product_id="P1")

        result = reconciler.reconcile(False, {"P1": 10})

        assert product_store.inventory_of("P1") == 15
        assert result.fulfilled == ["P1"]
        assert [item.to_dict() for item in result.order.line_items] == [{"P1": 10}]
        assert result.order.is_outgoing is False

    def test_restock_of_missing_product_fails(self, reconciler, order_store):
        """P2 absent, incoming {P2: 10} -> unfulfilled, NoFulfillment, no order."""
        with pytest.raises(NoFulfillmentError) as exc_info:
            reconciler.reconcile(False, {"P2": 10})

        assert exc_info.value.unfulfilled == ["P2"]
        assert order_store.orders == {}


# =============================================================================
# Conditional update and failures
# =============================================================================


class TestConditionalUpdate:

    def test_lost_race_demotes_to_unfulfilled(self, product_store, order_store):
        product_store.add("contended", inventory=5, product_id="P1")
        product_store.add("calm", inventory=5, product_id="P2")
        original_adjust = product_store.adjust_inventory

        def concurrent_writer_first(product_id, expected, updated):
            if product_id == "P1":
                # Another request sells one unit between our read and write
                product_store.products["P1"].inventory = expected - 1
            return original_adjust(product_id, expected, updated)

        product_store.adjust_inventory = concurrent_writer_first
        reconciler = OrderReconciler(product_store, order_store)

        result = reconciler.reconcile(True, {"P1": 2, "P2": 2})

        assert result.unfulfilled == ["P1"]
        assert result.reasons["P1"] == UnfulfilledReason.UPDATE_NOT_APPLIED
        assert product_store.inventory_of("P1") == 4
        assert result.fulfilled == ["P2"]
        assert [item.product_id for item in result.order.line_items] == ["P2"]

    def test_zero_quantity_is_not_applied(self, reconciler, product_store):
        product_store.add("widget", inventory=5, product_id="P1")

        with pytest.raises(NoFulfillmentError):
            reconciler.reconcile(True, {"P1": 0})

        assert product_store.inventory_of("P1") == 5

    def test_zero_incoming_quantity_is_not_applied(self, reconciler, product_store, order_store):
        product_store.add("widget", inventory=5, product_id="P1")
        product_store.add("gadget", inventory=1, product_id="P2")

        result = reconciler.reconcile(False, {"P1": 0, "P2": 4})

        assert result.unfulfilled == ["P1"]
        assert result.reasons["P1"] == UnfulfilledReason.UPDATE_NOT_APPLIED
        assert result.fulfilled == ["P2"]
        assert product_store.inventory_of("P1") == 5
        assert [item.to_dict() for item in order_store.orders[result.order_id].line_items] == [{"P2": 4}]

    def test_negative_outgoing_quantity_passes_through(self, reconciler, product_store):
        product_store.add("widget", inventory=5, product_id="P1")

        result = reconciler.reconcile(True, {"P1": -2})

        assert result.fulfilled == ["P1"]
        assert product_store.inventory_of("P1") == 7

    def test_store_unavailable_aborts(self, product_store, order_store):
        product_store.add("widget", inventory=5, product_id="P1")

        def unreachable(product_id):
            raise StoreUnavailableError()

        product_store.find_by_id = unreachable
        reconciler = OrderReconciler(product_store, order_store)

        with pytest.raises(StoreUnavailableError):
            reconciler.reconcile(True, {"P1": 1})
        assert order_store.orders == {}

    def test_item_level_store_error_is_absorbed(self, product_store, order_store):
        product_store.add("broken", inventory=5, product_id="P1")
        product_store.add("fine", inventory=5, product_id="P2")
        original_adjust = product_store.adjust_inventory

        def failing_adjust(product_id, expected, updated):
            if product_id == "P1":
                raise RepositoryError("Failed to update inventory")
            return original_adjust(product_id, expected, updated)

        product_store.adjust_inventory = failing_adjust
        reconciler = OrderReconciler(product_store, order_store)

        result = reconciler.reconcile(True, {"P1": 1, "P2": 1})

        assert result.unfulfilled == ["P1"]
        assert result.reasons["P1"] == UnfulfilledReason.STORE_ERROR
        assert result.fulfilled == ["P2"]

    def test_restock_beyond_integer_range_is_absorbed(self, product_store, order_store):
        product_store.add("small", inventory=5, product_id="A")
        product_store.add("huge", inventory=5, product_id="B")
        original_adjust = product_store.adjust_inventory

        def bounded_adjust(product_id, expected, updated):
            if updated > 2**63 - 1:
                raise RepositoryError("Failed to update inventory")
            return original_adjust(product_id, expected, updated)

        product_store.adjust_inventory = bounded_adjust
        reconciler = OrderReconciler(product_store, order_store)

        result = reconciler.reconcile(False, {"A": 3, "B": 2**63 - 1})

        assert result.fulfilled == ["A"]
        assert result.unfulfilled == ["B"]
        assert result.reasons["B"] == UnfulfilledReason.STORE_ERROR
        assert product_store.inventory_of("A") == 8
        assert product_store.inventory_of("B") == 5
        assert [item.to_dict() for item in order_store.orders[result.order_id].line_items] == [{"A": 3}]


# =============================================================================
# Request-level validation and persistence
# =============================================================================


class TestRequest:

    def test_empty_request_is_invalid(self, reconciler, product_store):
        with pytest.raises(InvalidInputError):
            reconciler.reconcile(True, {})
        assert product_store.adjust_calls == []

    @pytest.mark.parametrize("quantity", ["3", None, True, float("nan"), float("inf")])
    def test_malformed_quantity_is_rejected_before_mutation(self, reconciler, product_store, quantity):
        product_store.add("widget", inventory=5, product_id="P1")

        with pytest.raises(InvalidInputError):
            reconciler.reconcile(True, {"P1": 1, "P2": quantity})

        assert product_store.inventory_of("P1") == 5
        assert product_store.adjust_calls == []

    def test_non_boolean_direction_is_rejected(self, reconciler):
        with pytest.raises(InvalidInputError):
            reconciler.reconcile("yes", {"P1": 1})

    def test_one_order_persisted_per_request(self, reconciler, product_store, order_store):
        product_store.add("a", inventory=5, product_id="A")
        product_store.add("b", inventory=5, product_id="B")

        result = reconciler.reconcile(True, {"A": 1, "B": 1})

        assert list(order_store.orders) == [result.order_id]
        stored = order_store.orders[result.order_id]
        assert stored.is_outgoing is True
        assert [item.to_dict() for item in stored.line_items] == [{"A": 1}, {"B": 1}]
        assert stored.created_at.tzinfo is not None

    def test_submit_accepts_validated_request(self, reconciler, product_store):
        product_store.add("widget", inventory=5, product_id="P1")

        result = reconciler.submit(ReconciliationRequest(is_outgoing=True, quantities={"P1": 2}))

        assert result.fulfilled == ["P1"]

    def test_result_wire_shape(self, reconciler, product_store):
        product_store.add("widget", inventory=5, product_id="P1")

        data = reconciler.reconcile(True, {"P1": 8, "P9": 1}).to_dict()

        assert data["orderID"] == "order-1"
        assert data["partial"] == ["P1"]
        assert data["unfulfilled"] == ["P9"]
        assert data["fulfilled"] == []
        assert data["orderDetails"]["isOutgoing"] is True
        assert data["orderDetails"]["orderDetails"] == [{"P1": 5}]
        assert "datetime" in data["orderDetails"]
