#!/usr/bin/env python
import asyncio

import httpx

from sdk.inventory_client import InventoryClient, InventoryApiError


async def create_many(c: InventoryClient, names):
    # All creates go out at once; the server serializes the writes so none are lost.
    async with httpx.AsyncClient(timeout=c.timeout) as ac:
        return await asyncio.gather(*(c.create_product_async(n, quantity=i, client=ac) for i, n in enumerate(names)))


def main():
    c = InventoryClient()

    print("Adding products...")
    widget = c.create_product("Widget", quantity=3, category="hardware", location="A1", supplier="Acme")
    gadget = c.create_product("Gadget", quantity=12, category="electronics", location="B2")
    print(widget)
    print(gadget)

    print("\nSearching for 'wid'...")
    print(c.list_products(q="wid"))

    print("\nSorted by quantity (desc)...")
    print([(p["name"], p["quantity"]) for p in c.list_products(sort="quantity_desc")])

    print("\nUpdating Widget quantity to 5...")
    print(c.update_product(widget["id"], quantity=5))

    print("\nNegative quantity is rejected...")
    try:
        c.create_product("Broken", quantity=-1)
    except InventoryApiError as e:
        print(f"  {e}")

    before = len(c.list_products())
    names = [f"Bolt #{i}" for i in range(10)]
    print(f"\nCreating {len(names)} products concurrently...")
    created = asyncio.run(create_many(c, names))
    after = len(c.list_products())
    print(f"  collection grew from {before} to {after} (expected +{len(created)})")

    print("\nLow stock:")
    print([(p["name"], p["quantity"]) for p in c.low_stock()])

    print("\nCleaning up...")
    for p in [widget, gadget, *created]:
        c.delete_product(p["id"])
    print(f"  {len(c.list_products())} products left")


if __name__ == "__main__":
    main()
