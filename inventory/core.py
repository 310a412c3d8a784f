# inventory/core.py
import logging
import uuid
from typing import Optional, Dict, Any, List

from .database import Store
from .errors import NotFound, ValidationError
from .models import ProductCreate, ProductUpdate, _make_product_dict, utc_now_iso

logger = logging.getLogger(__name__)

# This file contains the logic behind the /products endpoints.

SORT_KEYS = {
    "quantity_asc": False,
    "quantity_desc": True,
}


def _matches(p: Dict[str, Any], term: str) -> bool:
    for field in ("name", "category"):
        value = p.get(field)
        if value and term in str(value).lower():
            return True
    return False


def _same_id(p: Dict[str, Any], product_id: str) -> bool:
    return str(p.get("id")) == str(product_id)


async def list_products_logic(store: Store, q: Optional[str] = None, sort: Optional[str] = None) -> List[Dict[str, Any]]:
    products = await store.load()

    if q:
        term = q.lower()
        products = [p for p in products if _matches(p, term)]

    if sort in SORT_KEYS:
        # sorted() is stable, so equal quantities keep their stored order
        products = sorted(products, key=lambda p: p.get("quantity") or 0, reverse=SORT_KEYS[sort])

    return products


async def get_product_logic(store: Store, product_id: str) -> Dict[str, Any]:
    for p in await store.load():
        if _same_id(p, product_id):
            return p
    raise NotFound()


async def create_product_logic(store: Store, payload: ProductCreate) -> Dict[str, Any]:
    if not (payload.name or "").strip():
        raise ValidationError("name required")
    quantity = payload.quantity if payload.quantity is not None else 0
    if quantity < 0:
        raise ValidationError("quantity negative")

    product = _make_product_dict(uuid.uuid4().hex, payload.model_copy(update={"quantity": quantity}))

    def append(products: List[Dict[str, Any]]) -> Dict[str, Any]:
        products.append(product)
        return product

    created = await store.mutate(append)
    logger.info("created product %s (%s)", created["id"], created["name"])
    return created


async def update_product_logic(store: Store, product_id: str, payload: ProductUpdate) -> Dict[str, Any]:
    changes = payload.changes()

    def merge(products: List[Dict[str, Any]]) -> Dict[str, Any]:
        for i, p in enumerate(products):
            if _same_id(p, product_id):
                # No re-validation here: updates are applied as sent.
                merged = {**p, **changes, "id": p["id"], "updatedDate": utc_now_iso()}
                products[i] = merged
                return merged
        raise NotFound()

    updated = await store.mutate(merge)
    logger.info("updated product %s fields=%s", updated["id"], sorted(changes))
    return updated


async def delete_product_logic(store: Store, product_id: str) -> None:
    def remove(products: List[Dict[str, Any]]) -> None:
        before = len(products)
        products[:] = [p for p in products if not _same_id(p, product_id)]
        if len(products) == before:
            raise NotFound()

    await store.mutate(remove)
    logger.info("deleted product %s", product_id)
