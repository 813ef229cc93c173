"""Tests for request schemas."""

import pytest
from pydantic import ValidationError

from catalog_service.domain.schemas.order import OrderSubmission
from catalog_service.domain.schemas.product import ProductCreate, ProductUpdate


class TestOrderSubmission:

    def test_parses_wire_payload(self):
        submission = OrderSubmission.model_validate(
            {"isOutgoing": True, "orderDetails": {"P1": 3, "P2": 1}}
        )

        request = submission.to_request()
        assert request.is_outgoing is True
        assert request.quantities == {"P1": 3, "P2": 1}
        assert list(request.quantities) == ["P1", "P2"]

    def test_whole_float_is_normalised_to_int(self):
        submission = OrderSubmission.model_validate(
            {"isOutgoing": False, "orderDetails": {"P1": 4.0}}
        )
        assert submission.order_details["P1"] == 4
        assert isinstance(submission.order_details["P1"], int)

    @pytest.mark.parametrize("payload", [
        {"orderDetails": {"P1": 1}},
        {"isOutgoing": "true", "orderDetails": {"P1": 1}},
        {"isOutgoing": 1, "orderDetails": {"P1": 1}},
        {"isOutgoing": True},
        {"isOutgoing": True, "orderDetails": {}},
        {"isOutgoing": True, "orderDetails": []},
        {"isOutgoing": True, "orderDetails": {"P1": "3"}},
        {"isOutgoing": True, "orderDetails": {"P1": None}},
        {"isOutgoing": True, "orderDetails": {"P1": True}},
        {"isOutgoing": True, "orderDetails": {"P1": 2.5}},
        {"isOutgoing": True, "orderDetails": {"  ": 1}},
        {"isOutgoing": True, "orderDetails": {"P1": 2**63}},
        {"isOutgoing": True, "orderDetails": {"P1": -(2**63)}},
        {"isOutgoing": False, "orderDetails": {"P1": 1e20}},
    ])
    def test_rejects_malformed_payloads(self, payload):
        with pytest.raises(ValidationError):
            OrderSubmission.model_validate(payload)

    def test_quantities_at_the_integer_limit_are_accepted(self):
        submission = OrderSubmission.model_validate(
            {"isOutgoing": False, "orderDetails": {"P1": 2**63 - 1, "P2": -(2**63 - 1)}}
        )
        assert submission.order_details == {"P1": 2**63 - 1, "P2": -(2**63 - 1)}

    def test_non_positive_quantities_are_accepted(self):
        submission = OrderSubmission.model_validate(
            {"isOutgoing": True, "orderDetails": {"P1": 0, "P2": -3}}
        )
        assert submission.order_details == {"P1": 0, "P2": -3}


class TestProductSchemas:

    def test_create_defaults(self):
        product = ProductCreate(name="Widget", price=9.99)
        assert product.description == ""
        assert product.inventory == 0

    @pytest.mark.parametrize("payload", [
        {"name": "", "price": 1},
        {"name": "Widget", "price": -1},
        {"name": "Widget", "price": 1, "inventory": -1},
        {"name": "Widget", "price": 1, "inventory": 1.5},
        {"name": "Widget", "price": 1, "colour": "red"},
    ])
    def test_create_rejects_invalid_fields(self, payload):
        with pytest.raises(ValidationError):
            ProductCreate.model_validate(payload)

    def test_update_requires_a_field(self):
        with pytest.raises(ValidationError):
            ProductUpdate.model_validate({})

    def test_update_keeps_only_provided_fields(self):
        update = ProductUpdate.model_validate({"inventory": 7})
        assert update.model_dump(exclude_none=True) == {"inventory": 7}
