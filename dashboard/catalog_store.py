"""
Persistent catalog store: the single writer of the product catalog.

The store loads the catalog from durable storage at startup, applies CRUD
mutations and writes the whole catalog back after every change. Storage
failures are logged and swallowed so the in-memory catalog stays the
source of truth for the running session.
"""

import json
import logging
import uuid
from collections.abc import Sequence

from pydantic import TypeAdapter, ValidationError

from connectors.storage import InMemoryStorage, KeyValueStorage
from models.errors import NotFound, PersistenceFailure
from models.inventory import Product, ProductDraft

logger = logging.getLogger(__name__)

STORAGE_KEY = "nexusinv_products"

_IMG = "https://images.unsplash.com/photo-{}?w=200&q=80"

# Built-in seed catalog, prices in INR.
INITIAL_PRODUCTS: tuple[Product, ...] = (
    Product(id="1", name="iPhone 15 Pro", category="Smartphones", price=134900, quantity=25, sku="APL-PH-15P", image=_IMG.format("1696446701796-da61225697cc")),
    Product(id="2", name="Sony WH-1000XM5", category="Audio", price=29990, quantity=40, sku="SNY-HD-XM5", image=_IMG.format("1618366712010-f4ae9c647dcb")),
    Product(id="3", name="MacBook Air M3", category="Laptops", price=114900, quantity=10, sku="APL-MB-M3", image=_IMG.format("1517336714731-489689fd1ca4")),
    Product(id="4", name="DJI Mini 4 Pro", category="Drones", price=98990, quantity=8, sku="DJI-DRN-M4", image=_IMG.format("1579829366248-204fe8413f31")),
    Product(id="5", name='Samsung 49" Odyssey', category="Monitors", price=145999, quantity=5, sku="SAM-MON-G9", image=_IMG.format("1527443224154-c4a3942d3acf")),
    Product(id="6", name="PlayStation 5 Slim", category="Gaming", price=54990, quantity=15, sku="SNY-PS5-SLM", image=_IMG.format("1606144042614-b0417c0ed120")),
    Product(id="7", name="iPad Air M2", category="Tablets", price=59900, quantity=12, sku="APL-IPD-AM2", image=_IMG.format("1544244015-0df4b3ffc6b0")),
    Product(id="8", name="Canon EOS R50", category="Cameras", price=75990, quantity=6, sku="CAN-EOS-R50", image=_IMG.format("1516035069371-29a1b244cc32")),
    Product(id="9", name="Samsung Galaxy Watch 6", category="Wearables", price=29999, quantity=20, sku="SAM-WCH-G6", image=_IMG.format("1579586337278-3befd40fd17a")),
    Product(id="10", name="Google Nest Hub (2nd Gen)", category="Smart Home", price=7999, quantity=30, sku="GGL-NST-H2", image=_IMG.format("1558089748-129f886f76fc")),
    Product(id="11", name="NVIDIA RTX 4070 Super", category="PC Components", price=65000, quantity=4, sku="NVD-RTX-4070S", image=_IMG.format("1591488320449-011701bb6704")),
    Product(id="12", name="Samsung T7 Shield 1TB", category="Storage", price=12999, quantity=45, sku="SAM-SSD-T7", image=_IMG.format("1597872200969-2b65d56bd16b")),
    Product(id="13", name="GoPro Hero 12 Black", category="Action Cameras", price=44990, quantity=10, sku="GOP-HER-12", image=_IMG.format("1564466021188-1e4b8a3b0007")),
    Product(id="14", name="TP-Link Deco XE75", category="Networking", price=28999, quantity=8, sku="TPL-DEC-XE75", image=_IMG.format("1544197150-b99a580bbcbf")),
    Product(id="15", name="Keychron K2 Keyboard", category="Accessories", price=8499, quantity=18, sku="KEY-K2-V2", image=_IMG.format("1595225476474-87563907a212")),
)

_CATALOG = TypeAdapter(list[Product])


def serialize_catalog(products: Sequence[Product]) -> str:
    """Encode a catalog as the stored JSON array."""
    return json.dumps(
        [
            {
                "id": p.id,
                "name": p.name,
                "category": p.category,
                "price": p.price,
                "quantity": p.quantity,
                "sku": p.sku,
                "image": p.image,
            }
            for p in products
        ],
        ensure_ascii=False,
    )


def deserialize_catalog(raw: str) -> list[Product]:
    """
    Decode a stored catalog.

    Raises:
        PersistenceFailure: if the record is not valid JSON, does not match
            the product schema, or has duplicate ids.
    """
    try:
        products = _CATALOG.validate_json(raw)
    except ValidationError as exc:
        raise PersistenceFailure(f"Stored catalog is malformed: {exc.error_count()} error(s)") from exc
    if len({p.id for p in products}) != len(products):
        raise PersistenceFailure("Stored catalog has duplicate product ids")
    return products


class CatalogStore:
    """
    Owns the ordered product list. Readers get immutable snapshots; every
    mutation bumps `revision` and is saved immediately.
    """

    def __init__(self, storage: KeyValueStorage | None = None, key: str = STORAGE_KEY):
        self.storage = storage if storage is not None else InMemoryStorage()
        self.key = key
        self.revision = 0
        self._products: list[Product] = self.load()

    @property
    def products(self) -> tuple[Product, ...]:
        return tuple(self._products)

    def __len__(self) -> int:
        return len(self._products)

    def get(self, product_id: str) -> Product | None:
        return next((p for p in self._products if p.id == product_id), None)

    def load(self) -> list[Product]:
        """Read the stored catalog; fall back to the seed catalog on absence or failure."""
        try:
            raw = self.storage.get_item(self.key)
            if raw is None:
                logger.info("No stored catalog found, using seed catalog.")
                return list(INITIAL_PRODUCTS)
            products = deserialize_catalog(raw)
        except Exception as exc:  # noqa: BLE001
            logger.error(f"Failed to load inventory from storage: {exc}")
            return list(INITIAL_PRODUCTS)
        logger.info(f"Loaded {len(products)} products from storage.")
        return products

    def save(self, products: Sequence[Product] | None = None) -> bool:
        """Write the catalog to storage. Returns False (after logging) when the write failed."""
        payload = serialize_catalog(self._products if products is None else products)
        try:
            self.storage.set_item(self.key, payload)
        except Exception as exc:  # noqa: BLE001
            logger.error(f"Failed to save inventory to storage: {exc}")
            return False
        return True

    def _commit(self) -> None:
        self.revision += 1
        self.save()

    def add(self, draft: ProductDraft) -> Product:
        product = Product(id=self._new_id(), **draft.model_dump())
        self._products.append(product)
        self._commit()
        logger.info(f"Added product {product.id} ({product.name}).")
        return product

    def update(self, product_id: str, draft: ProductDraft) -> Product:
        for index, current in enumerate(self._products):
            if current.id == product_id:
                updated = current.with_draft(draft)
                self._products[index] = updated
                self._commit()
                logger.info(f"Updated product {product_id}.")
                return updated
        raise NotFound(f"Product {product_id} not found")

    def remove(self, product_id: str) -> bool:
        remaining = [p for p in self._products if p.id != product_id]
        if len(remaining) == len(self._products):
            return False
        self._products = remaining
        self._commit()
        logger.info(f"Removed product {product_id}.")
        return True

    def adjust_stock(self, product_id: str, delta: int) -> Product | None:
        """Apply `delta` to a product's quantity, clamping at zero."""
        for index, current in enumerate(self._products):
            if current.id == product_id:
                updated = current.with_quantity(max(0, current.quantity + delta))
                self._products[index] = updated
                self._commit()
                return updated
        return None

    def _new_id(self) -> str:
        existing = {p.id for p in self._products}
        while True:
            candidate = str(uuid.uuid4())
            if candidate not in existing:
                return candidate
