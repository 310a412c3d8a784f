# inventory/models.py
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from pydantic import BaseModel, ConfigDict


class Product(BaseModel):
    id: str
    name: str
    category: Optional[str] = None
    quantity: int = 0
    location: str = ""
    supplier: str = ""
    updatedDate: str


class ProductCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    category: Optional[str] = None
    quantity: Optional[int] = 0
    location: str = ""
    supplier: str = ""


class ProductUpdate(BaseModel):
    """Partial update body. Only the fields the caller actually sent are merged."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    category: Optional[str] = None
    quantity: Optional[int] = None
    location: Optional[str] = None
    supplier: Optional[str] = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


def utc_now_iso() -> str:
    # Millisecond precision with a trailing Z, e.g. 2024-05-01T12:00:00.000Z
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _make_product_dict(product_id: str, p: ProductCreate) -> Dict[str, Any]:
    return Product(
        id=product_id,
        name=p.name,
        category=p.category,
        quantity=p.quantity,
        location=p.location,
        supplier=p.supplier,
        updatedDate=utc_now_iso(),
    ).model_dump()
