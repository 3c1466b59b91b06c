"""
Fact Bag normalization for product conditions.

The Fact Bag is the immutable snapshot every condition handler reads from.
`normalize_product_context` is a pure function of the raw product context and
returns ``None`` until the context is ready, that is until both the product id
and the selected item id are known. Every other fact degrades to an empty
tuple or ``False`` when it is missing upstream.

`FactBagMemo` is the caching layer a renderer keeps next to a layout: it
hands back the very same Fact Bag while the underlying context values are
unchanged, and a new one as soon as any of them changes.
"""

from typing import Any, Mapping, Optional, Tuple, Union
from dataclasses import dataclass, field

from shared.logging import get_logger
from .models import ProductContext

logger = get_logger("conditions.context")

RawContext = Union[ProductContext, Mapping[str, Any], None]


@dataclass(frozen=True)
class IdRecord:
    id: str
    name: Optional[str] = None


@dataclass(frozen=True)
class SpecificationProperty:
    name: str
    values: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CommercialOffer:
    list_price: float = 0
    price: float = 0
    available_quantity: float = 0


@dataclass(frozen=True)
class SellerOffer:
    seller_id: Optional[str]
    seller_default: bool = False
    commercial_offer: CommercialOffer = field(default_factory=CommercialOffer)

    @property
    def is_available(self) -> bool:
        return self.commercial_offer.available_quantity > 0


@dataclass(frozen=True)
class FactBag:
    """Normalized product facts.

    ``category_id`` and ``brand_id`` stay ``None`` when upstream omits them;
    identifier handlers treat an absent id as a non-match.
    """
    product_id: str
    selected_item_id: str
    category_id: Optional[str] = None
    brand_id: Optional[str] = None
    product_clusters: Tuple[IdRecord, ...] = ()
    cluster_highlights: Tuple[IdRecord, ...] = ()
    category_tree: Tuple[IdRecord, ...] = ()
    specification_properties: Tuple[SpecificationProperty, ...] = ()
    are_all_variations_selected: bool = False
    sellers: Tuple[SellerOffer, ...] = ()

    @property
    def available_sellers(self) -> Tuple[SellerOffer, ...]:
        return tuple(seller for seller in self.sellers if seller.is_available)


def _as_context(context: RawContext) -> ProductContext:
    if context is None:
        return ProductContext()
    if isinstance(context, ProductContext):
        return context
    return ProductContext.model_validate(context)


def as_text(value: Any) -> str:
    """String form of a fact value; integral floats render without a fraction."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _as_id(value: Any) -> Optional[str]:
    return None if value is None else as_text(value)


def _id_records(records) -> Tuple[IdRecord, ...]:
    return tuple(IdRecord(id=str(record.id), name=record.name) for record in records or ())


def _context_inputs(context: ProductContext) -> Tuple[Any, ...]:
    """The individual context values a Fact Bag is derived from."""
    product = context.product
    item = context.selected_item
    sku_selector = context.sku_selector

    return (
        product.product_id if product else None,
        product.category_id if product else None,
        product.brand_id if product else None,
        product.product_clusters if product else None,
        product.cluster_highlights if product else None,
        product.category_tree if product else None,
        product.properties if product else None,
        item.item_id if item else None,
        item.sellers if item else None,
        sku_selector.are_all_variations_selected if sku_selector else False,
    )


def build_fact_bag(
    product_id: Any,
    category_id: Any,
    brand_id: Any,
    product_clusters: Any,
    cluster_highlights: Any,
    category_tree: Any,
    properties: Any,
    selected_item_id: Any,
    sellers: Any,
    are_all_variations_selected: bool = False,
) -> Optional[FactBag]:
    """Build a Fact Bag from individual context values, or None if not ready."""
    # The product context may take a while to resolve the product and SKU
    if product_id is None or selected_item_id is None:
        return None

    return FactBag(
        product_id=str(product_id),
        selected_item_id=str(selected_item_id),
        category_id=_as_id(category_id),
        brand_id=_as_id(brand_id),
        product_clusters=_id_records(product_clusters),
        cluster_highlights=_id_records(cluster_highlights),
        category_tree=_id_records(category_tree),
        specification_properties=tuple(
            SpecificationProperty(
                name=prop.name,
                values=tuple(as_text(value) for value in prop.values)
            )
            for prop in properties or ()
        ),
        are_all_variations_selected=bool(are_all_variations_selected),
        sellers=tuple(
            SellerOffer(
                seller_id=_as_id(seller.seller_id),
                seller_default=seller.seller_default,
                commercial_offer=CommercialOffer(
                    list_price=seller.commercial_offer.list_price,
                    price=seller.commercial_offer.price,
                    available_quantity=seller.commercial_offer.available_quantity,
                ) if seller.commercial_offer else CommercialOffer()
            )
            for seller in sellers or ()
        ),
    )


def normalize_product_context(context: RawContext) -> Optional[FactBag]:
    """Normalize a raw product context into a Fact Bag.

    Returns None while the product id or the selected item id is missing.
    """
    return build_fact_bag(*_context_inputs(_as_context(context)))


def is_ready(context: RawContext) -> bool:
    """Whether a raw context carries enough identity to be evaluated."""
    return normalize_product_context(context) is not None


def _same_input(left: Any, right: Any) -> bool:
    if left is right:
        return True
    # Validated payloads compare by value, so re-validated dicts still match
    return type(left) is type(right) and left == right


class FactBagMemo:
    """Keeps the last Fact Bag and rebuilds it only when an input changes."""

    def __init__(self):
        self._inputs: Optional[Tuple[Any, ...]] = None
        self._fact_bag: Optional[FactBag] = None
        self.builds = 0

    def get(self, context: RawContext) -> Optional[FactBag]:
        inputs = _context_inputs(_as_context(context))

        if self._inputs is not None and all(
            _same_input(new, old) for new, old in zip(inputs, self._inputs)
        ):
            return self._fact_bag

        self._inputs = inputs
        self._fact_bag = build_fact_bag(*inputs)
        self.builds += 1
        logger.debug("Fact bag rebuilt", ready=self._fact_bag is not None, builds=self.builds)
        return self._fact_bag

    def clear(self):
        self._inputs = None
        self._fact_bag = None
