"""
Product condition handlers.

Each handler answers one condition key against a Fact Bag and the
condition's arguments. Handlers are pure and total: missing optional facts
make them return False, they never raise on a normalized Fact Bag.
Identifiers are always compared through their string form, so a numeric id
from one upstream source matches the same id sent as a string by another.
"""

from types import MappingProxyType
from typing import Any, Callable, List, Mapping, Optional, Tuple

from ..context.facts import FactBag, IdRecord, as_text
from .models import (
    ConditionKey, IdArgs, SpecificationArgs, QuantityArgs, BestPriceArgs, SellerIdsArgs
)

Handler = Callable[[FactBag, Any], bool]


def _same_id(value: Any, expected: Any) -> bool:
    if value is None or expected is None:
        return False
    return str(value) == str(expected)


def _contains_id(records: Tuple[IdRecord, ...], expected: Any) -> bool:
    return any(_same_id(record.id, expected) for record in records)


def product_id(facts: FactBag, args: IdArgs) -> bool:
    return _same_id(facts.product_id, args.id)


def category_id(facts: FactBag, args: IdArgs) -> bool:
    return _same_id(facts.category_id, args.id)


def brand_id(facts: FactBag, args: IdArgs) -> bool:
    return _same_id(facts.brand_id, args.id)


def selected_item_id(facts: FactBag, args: IdArgs) -> bool:
    return _same_id(facts.selected_item_id, args.id)


def are_all_variations_selected(facts: FactBag, args: Any = None) -> bool:
    return facts.are_all_variations_selected


def product_clusters(facts: FactBag, args: IdArgs) -> bool:
    return _contains_id(facts.product_clusters, args.id)


def product_cluster_highlights(facts: FactBag, args: IdArgs) -> bool:
    return _contains_id(facts.cluster_highlights, args.id)


def category_tree(facts: FactBag, args: IdArgs) -> bool:
    return _contains_id(facts.category_tree, args.id)


def specification_properties(facts: FactBag, args: SpecificationArgs) -> bool:
    """Property exists, or holds the given value when one is set."""
    specification = next(
        (prop for prop in facts.specification_properties if prop.name == args.name),
        None
    )

    if specification is None:
        return False
    if args.value is None:
        return True

    return as_text(args.value) in specification.values


def is_product_available(facts: FactBag, args: Any = None) -> bool:
    return any(seller.is_available for seller in facts.sellers)


def has_more_sellers_than(facts: FactBag, args: QuantityArgs) -> bool:
    return len(facts.available_sellers) > args.quantity


def has_best_price(facts: FactBag, args: Optional[BestPriceArgs] = None) -> bool:
    """Whether the default seller's price differs from its list price.

    Falls back to the first seller when none is marked default. A product
    with no sellers never has a best price.
    """
    if not facts.sellers:
        return False

    seller = next((s for s in facts.sellers if s.seller_default), facts.sellers[0])
    offer = seller.commercial_offer

    expected = True if args is None or args.value is None else args.value
    has_discount = offer.list_price != offer.price

    return has_discount == expected


def seller_id(facts: FactBag, args: SellerIdsArgs) -> bool:
    ids = {str(id_) for id_ in args.ids}
    return any(
        seller.seller_id is not None and seller.seller_id in ids
        for seller in facts.available_sellers
    )


HANDLERS: Mapping[str, Handler] = MappingProxyType({
    ConditionKey.PRODUCT_ID.value: product_id,
    ConditionKey.CATEGORY_ID.value: category_id,
    ConditionKey.BRAND_ID.value: brand_id,
    ConditionKey.SELECTED_ITEM_ID.value: selected_item_id,
    ConditionKey.ARE_ALL_VARIATIONS_SELECTED.value: are_all_variations_selected,
    ConditionKey.PRODUCT_CLUSTERS.value: product_clusters,
    ConditionKey.PRODUCT_CLUSTER_HIGHLIGHTS.value: product_cluster_highlights,
    ConditionKey.CATEGORY_TREE.value: category_tree,
    ConditionKey.SPECIFICATION_PROPERTIES.value: specification_properties,
    ConditionKey.IS_PRODUCT_AVAILABLE.value: is_product_available,
    ConditionKey.HAS_MORE_SELLERS_THAN.value: has_more_sellers_than,
    ConditionKey.HAS_BEST_PRICE.value: has_best_price,
    ConditionKey.SELLER_ID.value: seller_id,
})


def list_handler_keys(handlers: Mapping[str, Handler] = HANDLERS) -> List[str]:
    """Condition keys supported by a registry, in registration order."""
    return list(handlers.keys())
