"""In-memory data for the mock adapter, seeded deterministically."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

Record = dict[str, Any]

_FIRST = ("Ada", "Grace", "Alan", "Linus", "Barbara", "Ken", "Margaret", "Dennis")
_LAST = ("Lovelace", "Hopper", "Turing", "Torvalds", "Liskov", "Thompson", "Hamilton", "Ritchie")
_PRODUCTS = ("T-Shirt", "Hoodie", "Mug", "Sticker Pack", "Notebook", "Water Bottle")
_SIZES = ("S", "M", "L")
_LOCATIONS = ("WH001", "WH002")
_STATUSES = ("new", "processing", "shipped", "delivered")


def now_iso() -> str:
    return datetime.now(UTC).isoformat()


@dataclass(slots=True)
class MockDataStore:
    """Entity tables keyed by id, plus inventory keyed by (sku, location)."""

    orders: dict[str, Record] = field(default_factory=dict)
    products: dict[str, Record] = field(default_factory=dict)
    variants: dict[str, Record] = field(default_factory=dict)
    customers: dict[str, Record] = field(default_factory=dict)
    inventory: dict[tuple[str, str], Record] = field(default_factory=dict)
    fulfillments: dict[str, Record] = field(default_factory=dict)
    returns: dict[str, Record] = field(default_factory=dict)
    _counter: int = 0

    def next_id(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}-{self._counter:06d}"

    def sizes(self) -> dict[str, int]:
        return {
            "orders": len(self.orders),
            "products": len(self.products),
            "variants": len(self.variants),
            "customers": len(self.customers),
            "fulfillments": len(self.fulfillments),
            "returns": len(self.returns),
        }

    def variant_by_sku(self, sku: str) -> Record | None:
        return next((v for v in self.variants.values() if v["sku"] == sku), None)

    @classmethod
    def seeded(cls, size: int = 10, seed: int = 7) -> MockDataStore:
        """Build a store with `size` customers and orders plus a small catalog."""
        rng = random.Random(seed)
        store = cls()
        base = datetime(2024, 1, 1, tzinfo=UTC)

        for name in _PRODUCTS:
            pid = store.next_id("PROD")
            handle = name.lower().replace(" ", "-")
            store.products[pid] = {
                "id": pid,
                "name": name,
                "handle": handle,
                "status": "active",
                "options": [{"name": "Size", "values": list(_SIZES)}],
                "createdAt": base.isoformat(),
                "updatedAt": base.isoformat(),
                "tenantId": "mock-tenant",
            }
            for size_name in _SIZES:
                vid = store.next_id("VAR")
                sku = f"{handle.upper()}-{size_name}"
                store.variants[vid] = {
                    "id": vid,
                    "productId": pid,
                    "sku": sku,
                    "title": f"{name} / {size_name}",
                    "selectedOptions": [{"name": "Size", "value": size_name}],
                    "price": float(rng.randint(5, 60)),
                    "currency": "USD",
                    "createdAt": base.isoformat(),
                    "updatedAt": base.isoformat(),
                    "tenantId": "mock-tenant",
                }
                for loc in _LOCATIONS:
                    on_hand = rng.randint(10, 120)
                    unavailable = rng.randint(0, 9)
                    store.inventory[(sku, loc)] = {
                        "sku": sku,
                        "locationId": loc,
                        "onHand": on_hand,
                        "unavailable": unavailable,
                        "available": on_hand - unavailable,
                        "updatedAt": base.isoformat(),
                    }

        skus = [v["sku"] for v in store.variants.values()]
        for i in range(size):
            cid = store.next_id("CUST")
            first, last = _FIRST[i % len(_FIRST)], _LAST[i % len(_LAST)]
            store.customers[cid] = {
                "id": cid,
                "firstName": first,
                "lastName": last,
                "email": f"{first.lower()}.{last.lower()}@example.com",
                "status": "active",
                "type": "individual",
                "createdAt": (base + timedelta(days=i)).isoformat(),
                "updatedAt": (base + timedelta(days=i)).isoformat(),
                "tenantId": "mock-tenant",
            }
            oid = store.next_id("ORD")
            sku = rng.choice(skus)
            qty = rng.randint(1, 3)
            price = store.variant_by_sku(sku)["price"]  # type: ignore[index]
            created = (base + timedelta(days=i, hours=2)).isoformat()
            store.orders[oid] = {
                "id": oid,
                "externalId": f"EXT-{1000 + i}",
                "name": f"#{1000 + i}",
                "status": _STATUSES[i % len(_STATUSES)],
                "currency": "USD",
                "customer": {"id": cid, "firstName": first, "lastName": last},
                "lineItems": [{
                    "id": store.next_id("LI"),
                    "sku": sku,
                    "quantity": qty,
                    "unitPrice": price,
                    "totalPrice": price * qty,
                }],
                "totalPrice": price * qty,
                "createdAt": created,
                "updatedAt": created,
                "tenantId": "mock-tenant",
            }
        return store
