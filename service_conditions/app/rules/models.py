"""
Condition data models for the Condition Layout service.
"""

from typing import Dict, Any, Optional, List, Tuple, Union, Sequence, Mapping, Literal, Annotated
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from shared.errors import UnknownConditionError, ConditionValidationError
from ..context.models import ProductContext


Identifier = Union[str, int]


class MatchType(str, Enum):
    """How per-condition results are combined."""
    ALL = "all"
    ANY = "any"


class ConditionKey(str, Enum):
    """Supported condition keys."""
    PRODUCT_ID = "productId"
    CATEGORY_ID = "categoryId"
    BRAND_ID = "brandId"
    SELECTED_ITEM_ID = "selectedItemId"
    ARE_ALL_VARIATIONS_SELECTED = "areAllVariationsSelected"
    PRODUCT_CLUSTERS = "productClusters"
    PRODUCT_CLUSTER_HIGHLIGHTS = "productClusterHighlights"
    CATEGORY_TREE = "categoryTree"
    SPECIFICATION_PROPERTIES = "specificationProperties"
    IS_PRODUCT_AVAILABLE = "isProductAvailable"
    HAS_MORE_SELLERS_THAN = "hasMoreSellersThan"
    HAS_BEST_PRICE = "hasBestPrice"
    SELLER_ID = "sellerId"


# Argument payloads

class ConditionArgs(BaseModel):
    model_config = ConfigDict(frozen=True)


class IdArgs(ConditionArgs):
    id: Identifier


class SpecificationArgs(ConditionArgs):
    name: str
    value: Optional[Union[str, int, float]] = None


class QuantityArgs(ConditionArgs):
    quantity: float


class BestPriceArgs(ConditionArgs):
    # null and omitted both mean "expect a discount"
    value: Optional[bool] = None


class SellerIdsArgs(ConditionArgs):
    ids: Tuple[Identifier, ...] = ()


# Condition variants, one per key

class BaseCondition(BaseModel):
    """Common shape of every condition."""
    model_config = ConfigDict(frozen=True)

    key: str
    args: Optional[Any] = None


class ProductIdCondition(BaseCondition):
    key: Literal["productId"]
    args: IdArgs


class CategoryIdCondition(BaseCondition):
    key: Literal["categoryId"]
    args: IdArgs


class BrandIdCondition(BaseCondition):
    key: Literal["brandId"]
    args: IdArgs


class SelectedItemIdCondition(BaseCondition):
    key: Literal["selectedItemId"]
    args: IdArgs


class AreAllVariationsSelectedCondition(BaseCondition):
    key: Literal["areAllVariationsSelected"]
    args: Optional[Dict[str, Any]] = None


class ProductClustersCondition(BaseCondition):
    key: Literal["productClusters"]
    args: IdArgs


class ProductClusterHighlightsCondition(BaseCondition):
    key: Literal["productClusterHighlights"]
    args: IdArgs


class CategoryTreeCondition(BaseCondition):
    key: Literal["categoryTree"]
    args: IdArgs


class SpecificationPropertiesCondition(BaseCondition):
    key: Literal["specificationProperties"]
    args: SpecificationArgs


class IsProductAvailableCondition(BaseCondition):
    key: Literal["isProductAvailable"]
    args: Optional[Dict[str, Any]] = None


class HasMoreSellersThanCondition(BaseCondition):
    key: Literal["hasMoreSellersThan"]
    args: QuantityArgs


class HasBestPriceCondition(BaseCondition):
    key: Literal["hasBestPrice"]
    args: Optional[BestPriceArgs] = None


class SellerIdCondition(BaseCondition):
    key: Literal["sellerId"]
    args: SellerIdsArgs


Condition = Annotated[
    Union[
        ProductIdCondition,
        CategoryIdCondition,
        BrandIdCondition,
        SelectedItemIdCondition,
        AreAllVariationsSelectedCondition,
        ProductClustersCondition,
        ProductClusterHighlightsCondition,
        CategoryTreeCondition,
        SpecificationPropertiesCondition,
        IsProductAvailableCondition,
        HasMoreSellersThanCondition,
        HasBestPriceCondition,
        SellerIdCondition,
    ],
    Field(discriminator="key"),
]

_CONDITION_ADAPTER = TypeAdapter(Condition)

KNOWN_KEYS = frozenset(key.value for key in ConditionKey)


def parse_condition(raw: Union[Mapping[str, Any], BaseCondition]) -> BaseCondition:
    """Validate one raw condition into its typed variant."""
    if isinstance(raw, BaseCondition):
        if type(raw) is not BaseCondition:
            return raw
        # Untyped conditions are re-validated into their variant
        raw = raw.model_dump()

    key = raw.get("key") if isinstance(raw, Mapping) else None
    if isinstance(key, str) and key not in KNOWN_KEYS:
        raise UnknownConditionError(key, KNOWN_KEYS)

    try:
        return _CONDITION_ADAPTER.validate_python(raw)
    except ValidationError as e:
        raise ConditionValidationError(
            f"Invalid condition: {key!r}",
            {"key": key, "errors": e.errors(include_url=False, include_context=False)}
        ) from e


def parse_conditions(raw_conditions: Sequence[Union[Mapping[str, Any], BaseCondition]]) -> Tuple[BaseCondition, ...]:
    """Validate an ordered list of raw conditions, keeping their order."""
    return tuple(parse_condition(raw) for raw in raw_conditions)


@dataclass(frozen=True)
class ConditionOutcome:
    """Result of a single condition."""
    key: str
    matched: bool


@dataclass
class EvaluationResult:
    """Result of an explained evaluation."""
    result: bool
    match_type: MatchType
    outcomes: List[ConditionOutcome] = field(default_factory=list)
    evaluation_time_ms: float = 0.0

    @property
    def matched_conditions(self) -> List[str]:
        return [outcome.key for outcome in self.outcomes if outcome.matched]

    @property
    def failed_conditions(self) -> List[str]:
        return [outcome.key for outcome in self.outcomes if not outcome.matched]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "result": self.result,
            "matchType": self.match_type.value,
            "matchedConditions": self.matched_conditions,
            "failedConditions": self.failed_conditions,
            "evaluationTimeMs": self.evaluation_time_ms,
        }


class EvaluateRequest(BaseModel):
    """Request model for a condition evaluation."""
    model_config = ConfigDict(populate_by_name=True)

    context: ProductContext = Field(default_factory=ProductContext, description="Product context")
    conditions: List[Dict[str, Any]] = Field(default_factory=list, description="Ordered conditions")
    match_type: Optional[MatchType] = Field(None, alias="matchType", description="Match type")
    then: Optional[Any] = Field(None, description="Content rendered when conditions match")
    else_: Optional[Any] = Field(None, alias="else", description="Content rendered otherwise")
    children: Optional[Any] = Field(None, description="Fallback for the then branch")


class EvaluateResponse(BaseModel):
    """Response model for a condition evaluation."""
    model_config = ConfigDict(populate_by_name=True)

    ready: bool = Field(..., description="Whether the product context was complete")
    result: Optional[bool] = Field(None, description="Evaluation result, null when not ready")
    branch: Optional[str] = Field(None, description="Selected branch")
    content: Optional[Any] = Field(None, description="Content of the selected branch")
    match_type: MatchType = Field(..., alias="matchType", description="Match type used")
    explanation: Optional[Dict[str, Any]] = Field(None, description="Per-condition outcomes")


class ValidateRequest(BaseModel):
    """Request model for condition validation."""
    conditions: List[Dict[str, Any]] = Field(default_factory=list, description="Conditions to validate")


class ValidateResponse(BaseModel):
    """Response model for condition validation."""
    valid: bool
    conditions: List[Dict[str, Any]]
