"""
Product context payloads as delivered by the storefront.

Every part of the context is optional: the product context provider fills it
in progressively while the page loads.
"""

from typing import List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


Identifier = Union[str, int]


class ContextPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class IdPayload(ContextPayload):
    id: Identifier
    name: Optional[str] = None


class PropertyPayload(ContextPayload):
    name: str
    values: List[Union[str, int, float]] = Field(default_factory=list)


class CommercialOfferPayload(ContextPayload):
    list_price: float = Field(0, alias="ListPrice")
    price: float = Field(0, alias="Price")
    available_quantity: float = Field(0, alias="AvailableQuantity")


class SellerPayload(ContextPayload):
    seller_id: Optional[Identifier] = Field(None, alias="sellerId")
    seller_name: Optional[str] = Field(None, alias="sellerName")
    seller_default: bool = Field(False, alias="sellerDefault")
    # Upstream spells it "commertialOffer"
    commercial_offer: Optional[CommercialOfferPayload] = Field(
        None,
        validation_alias=AliasChoices("commertialOffer", "commercialOffer", "commercial_offer"),
    )


class ProductPayload(ContextPayload):
    product_id: Optional[Identifier] = Field(None, alias="productId")
    category_id: Optional[Identifier] = Field(None, alias="categoryId")
    brand_id: Optional[Identifier] = Field(None, alias="brandId")
    product_clusters: Optional[List[IdPayload]] = Field(None, alias="productClusters")
    cluster_highlights: Optional[List[IdPayload]] = Field(None, alias="clusterHighlights")
    category_tree: Optional[List[IdPayload]] = Field(None, alias="categoryTree")
    properties: Optional[List[PropertyPayload]] = None


class SelectedItemPayload(ContextPayload):
    item_id: Optional[Identifier] = Field(None, alias="itemId")
    sellers: Optional[List[SellerPayload]] = None


class SkuSelectorPayload(ContextPayload):
    are_all_variations_selected: bool = Field(False, alias="areAllVariationsSelected")


class ProductContext(ContextPayload):
    """Raw product context: product, selected item and SKU selector state."""
    product: Optional[ProductPayload] = None
    selected_item: Optional[SelectedItemPayload] = Field(None, alias="selectedItem")
    sku_selector: Optional[SkuSelectorPayload] = Field(None, alias="skuSelector")
