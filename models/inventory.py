"""
Inventory-related data models for the dashboard.
Includes Product, ProductDraft and CatalogSummary plus catalog search.
"""

import random
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ValidationRejection

DEFAULT_PRODUCT_IMAGE = "https://images.unsplash.com/photo-1550009158-9ebf69173e03?w=200&q=80"


class ProductDraft(BaseModel):
    """Every editable Product field; what the add/edit form submits."""

    model_config = ConfigDict(frozen=True)

    name: str
    category: str
    price: float = Field(ge=0, allow_inf_nan=False)
    quantity: int = Field(ge=0)
    sku: str
    image: str = ""

    @field_validator("quantity", mode="before")
    @classmethod
    def _reject_bool_quantity(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("quantity must be a whole number, not a boolean")
        return value

    @field_validator("image", mode="before")
    @classmethod
    def _none_image_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "ProductDraft":
        """
        Build a draft from raw form input.

        Raises:
            ValidationRejection: if a field is missing or a numeric field is
                malformed or negative.
        """
        try:
            return cls.model_validate(dict(form))
        except ValidationError as exc:
            fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err.get("loc"))
            raise ValidationRejection(f"Invalid product form fields: {fields}") from exc

    @classmethod
    def blank(cls) -> "ProductDraft":
        """Pre-filled draft shown when adding a new product."""
        return cls(
            name="",
            category="",
            price=0,
            quantity=0,
            sku=f"ELC-{random.randint(0, 9999)}",
            image=DEFAULT_PRODUCT_IMAGE,
        )


class Product(ProductDraft):
    """A catalog entry. `id` is assigned by the catalog store and never changes."""

    id: str = Field(min_length=1)

    @property
    def line_value(self) -> float:
        return self.price * self.quantity

    def with_draft(self, draft: ProductDraft) -> "Product":
        """Return a copy with every field except `id` taken from `draft`."""
        return Product(id=self.id, **draft.model_dump())

    def with_quantity(self, quantity: int) -> "Product":
        return self.model_copy(update={"quantity": quantity})


class CatalogSummary(BaseModel):
    """Headline figures for a catalog."""

    sku_count: int
    total_quantity: int
    total_value: float

    @classmethod
    def of(cls, products: Iterable[Product]) -> "CatalogSummary":
        items = list(products)
        return cls(
            sku_count=len(items),
            total_quantity=sum(p.quantity for p in items),
            total_value=sum(p.line_value for p in items),
        )


def filter_products(products: Iterable[Product], term: str) -> list[Product]:
    """Case-insensitive search over name, category and SKU, keeping catalog order."""
    needle = term.lower()
    return [
        p
        for p in products
        if needle in p.name.lower() or needle in p.category.lower() or needle in p.sku.lower()
    ]
