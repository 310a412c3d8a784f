# sdk/inventory_client.py
import json
import requests
import httpx
from typing import Optional, Dict, Any, List

from inventory.config import settings


class InventoryApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message


def _check(r):
    """Return the decoded body, or raise InventoryApiError with the server's error text."""
    if r.status_code >= 400:
        try:
            message = r.json().get("error", r.text)
        except ValueError:
            message = r.text
        raise InventoryApiError(r.status_code, message)
    return r.json()


class InventoryClient:
    def __init__(self, base_url: str = settings.api_url, timeout: int = 10, session=None):
        self.base_url = base_url.rstrip("/")
        # Anything with requests-style get/post/put/delete works here (tests pass a TestClient).
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def list_products(self, q: Optional[str] = None, sort: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {}
        if q:
            params["q"] = q
        if sort:
            params["sort"] = sort
        r = self.session.get(f"{self.base_url}/products", params=params, timeout=self.timeout)
        return _check(r)

    def get_product(self, product_id: str) -> Dict[str, Any]:
        r = self.session.get(f"{self.base_url}/products/{product_id}", timeout=self.timeout)
        return _check(r)

    def create_product(self, name: str, quantity: int = 0, category: Optional[str] = None,
                       location: str = "", supplier: str = "") -> Dict[str, Any]:
        r = self.session.post(f"{self.base_url}/products", json={
            "name": name, "category": category, "quantity": quantity,
            "location": location, "supplier": supplier,
        }, timeout=self.timeout)
        return _check(r)

    def update_product(self, product_id: str, **fields) -> Dict[str, Any]:
        r = self.session.put(f"{self.base_url}/products/{product_id}", json=fields, timeout=self.timeout)
        return _check(r)

    def delete_product(self, product_id: str) -> Dict[str, Any]:
        r = self.session.delete(f"{self.base_url}/products/{product_id}", timeout=self.timeout)
        return _check(r)

    def low_stock(self, threshold: int = settings.low_stock_threshold) -> List[Dict[str, Any]]:
        return [p for p in self.list_products(sort="quantity_asc") if (p.get("quantity") or 0) < threshold]

    def export_products(self, path: str) -> int:
        """Write the full product list to ``path`` as pretty JSON. Returns the number of products."""
        products = self.list_products()
        with open(path, "w", encoding="utf-8") as f:
            json.dump(products, f, indent=2, ensure_ascii=False)
        return len(products)

    async def create_product_async(self, name: str, quantity: int = 0, category: Optional[str] = None,
                                   location: str = "", supplier: str = "",
                                   client: Optional[httpx.AsyncClient] = None) -> Dict[str, Any]:
        payload = {"name": name, "category": category, "quantity": quantity,
                   "location": location, "supplier": supplier}
        if client is not None:
            r = await client.post(f"{self.base_url}/products", json=payload)
            return _check(r)
        async with httpx.AsyncClient(timeout=self.timeout) as ac:
            r = await ac.post(f"{self.base_url}/products", json=payload)
            return _check(r)


if __name__ == "__main__":
    import argparse
    from rich import print

    parser = argparse.ArgumentParser(description="Inventory CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    lp = subparsers.add_parser("list", help="List products")
    lp.add_argument("--q", help="Search name or category")
    lp.add_argument("--sort", choices=["quantity_asc", "quantity_desc"], help="Sort by quantity")

    gp = subparsers.add_parser("get", help="Get a product by its ID")
    gp.add_argument("--product-id", required=True)

    ap = subparsers.add_parser("add", help="Add a product")
    ap.add_argument("--name", required=True)
    ap.add_argument("--quantity", type=int, default=0)
    ap.add_argument("--category")
    ap.add_argument("--location", default="")
    ap.add_argument("--supplier", default="")

    up = subparsers.add_parser("update", help="Update fields of a product")
    up.add_argument("--product-id", required=True)
    up.add_argument("--name")
    up.add_argument("--quantity", type=int)
    up.add_argument("--category")
    up.add_argument("--location")
    up.add_argument("--supplier")

    dp = subparsers.add_parser("delete", help="Delete a product")
    dp.add_argument("--product-id", required=True)

    ep = subparsers.add_parser("export", help="Export all products to a JSON file")
    ep.add_argument("--out", default="products-export.json")

    ls = subparsers.add_parser("low-stock", help="Products below the low-stock threshold")
    ls.add_argument("--threshold", type=int, default=settings.low_stock_threshold)

    args = parser.parse_args()
    c = InventoryClient()

    try:
        if args.command == "list":
            print(c.list_products(args.q, args.sort))
        elif args.command == "get":
            print(c.get_product(args.product_id))
        elif args.command == "add":
            print(c.create_product(args.name, args.quantity, args.category, args.location, args.supplier))
        elif args.command == "update":
            fields = {k: getattr(args, k) for k in ("name", "quantity", "category", "location", "supplier")
                      if getattr(args, k) is not None}
            print(c.update_product(args.product_id, **fields))
        elif args.command == "delete":
            print(c.delete_product(args.product_id))
        elif args.command == "export":
            print(f"Exported {c.export_products(args.out)} products to {args.out}")
        elif args.command == "low-stock":
            print(c.low_stock(args.threshold))
    except InventoryApiError as e:
        print(f"[red]{e}[/red]")
        raise SystemExit(1)
