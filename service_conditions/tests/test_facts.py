"""
Unit tests for Fact Bag normalization.
"""

import pytest

from service_conditions.app.context.facts import (
    FactBag, FactBagMemo, as_text, normalize_product_context, is_ready
)
from service_conditions.app.context.models import ProductContext
from shared.test_helpers import create_mock_product_context, create_mock_seller


class TestNormalizeProductContext:
    """Test cases for normalize_product_context."""

    @pytest.mark.parametrize("overrides", [
        {"product_id": None},
        {"item_id": None},
        {"product_id": None, "item_id": None},
    ])
    def test_not_ready_without_identity(self, overrides):
        context = create_mock_product_context(**overrides)

        assert normalize_product_context(context) is None
        assert is_ready(context) is False

    def test_empty_context_is_not_ready(self):
        assert normalize_product_context(None) is None
        assert normalize_product_context({}) is None

    def test_partial_context(self):
        """Only identity is required, everything else degrades."""
        facts = normalize_product_context({
            "product": {"productId": 1},
            "selectedItem": {"itemId": 2},
        })

        assert isinstance(facts, FactBag)
        assert facts.product_id == "1"
        assert facts.selected_item_id == "2"
        assert facts.category_id is None
        assert facts.product_clusters == ()
        assert facts.cluster_highlights == ()
        assert facts.category_tree == ()
        assert facts.specification_properties == ()
        assert facts.sellers == ()
        assert facts.are_all_variations_selected is False

    def test_full_context(self):
        facts = normalize_product_context(create_mock_product_context(
            clusters=[140],
            category_tree=[1, 10],
            properties={"color": ["red", 2]},
            sellers=[create_mock_seller("1", available_quantity=4, list_price=50, price=40)],
            are_all_variations_selected=True,
        ))

        assert facts.product_clusters[0].id == "140"
        assert facts.product_clusters[0].name == "Cluster 140"
        assert [record.id for record in facts.category_tree] == ["1", "10"]
        assert facts.specification_properties[0].values == ("red", "2")
        assert facts.are_all_variations_selected is True

        seller = facts.sellers[0]
        assert seller.seller_id == "1"
        assert seller.commercial_offer.list_price == 50
        assert seller.commercial_offer.price == 40
        assert seller.is_available is True

    def test_commercial_offer_spellings(self):
        context = create_mock_product_context(sellers=[
            {"sellerId": "a", "commercialOffer": {"AvailableQuantity": 1}},
            {"sellerId": "b"},
        ])

        facts = normalize_product_context(context)

        assert facts.sellers[0].is_available is True
        assert facts.sellers[1].is_available is False
        assert facts.available_sellers == (facts.sellers[0],)

    def test_integral_float_text(self):
        assert as_text(1.0) == "1"
        assert as_text(2.5) == "2.5"
        assert as_text(7) == "7"
        assert as_text("x") == "x"

    def test_fact_bag_is_immutable(self):
        facts = normalize_product_context(create_mock_product_context())

        with pytest.raises(AttributeError):
            facts.product_id = "other"


class TestFactBagMemo:
    """Test cases for FactBagMemo."""

    def test_same_inputs_reuse_fact_bag(self):
        memo = FactBagMemo()
        context = ProductContext.model_validate(create_mock_product_context())

        first = memo.get(context)
        second = memo.get(context)

        assert first is second
        assert memo.builds == 1

    def test_changed_input_rebuilds(self):
        memo = FactBagMemo()
        context = ProductContext.model_validate(create_mock_product_context(item_id="1"))
        other = context.model_copy(update={
            "selected_item": context.selected_item.model_copy(update={"item_id": "2"})
        })

        first = memo.get(context)
        second = memo.get(other)

        assert first is not second
        assert second.selected_item_id == "2"
        assert memo.builds == 2

    def test_not_ready_is_memoized(self):
        memo = FactBagMemo()
        context = ProductContext.model_validate(create_mock_product_context(product_id=None))

        assert memo.get(context) is None
        assert memo.get(context) is None
        assert memo.builds == 1

    def test_clear(self):
        memo = FactBagMemo()
        context = ProductContext.model_validate(create_mock_product_context())

        memo.get(context)
        memo.clear()
        memo.get(context)

        assert memo.builds == 2

    def test_same_raw_context_reuses_fact_bag(self):
        memo = FactBagMemo()
        context = create_mock_product_context()

        first = memo.get(context)
        second = memo.get(context)

        assert first is second
        assert memo.builds == 1

    def test_equal_raw_contexts_reuse_fact_bag(self):
        memo = FactBagMemo()

        first = memo.get(create_mock_product_context(clusters=["A"]))
        second = memo.get(create_mock_product_context(clusters=["A"]))

        assert first is second
        assert memo.builds == 1
