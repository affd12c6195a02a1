#!/usr/bin/env python3
"""
Seed script: creates categories, tags and products through the admin API (no direct DB).
Run: API must be running.
  python scripts/seed_data.py
  python scripts/seed_data.py --products 200
"""

import argparse
import random

import httpx

API_BASE = "http://localhost:8000/api/v1/models"

CATEGORIES = ["Laptops", "Peripherals", "Audio", "Kitchen", "Books", "Streaming"]
TAGS = ["new", "sale", "bestseller", "refurbished", "wireless", "gift"]
TITLES = [
    "MacBook Pro", "Mechanical keyboard", "Wireless mouse", "Bluetooth headphones",
    "27 inch monitor", "HD webcam", "USB-C cable", "Laptop stand", "Coffee maker",
    "Electric kettle", "Python programming book", "Ring light", "Tripod", "Streaming mic",
]
OPENING_TIMES = ["8:00 AM", "9:30 AM", "10:00 AM", "12:00 PM", "1:15 PM"]


def _create(client: httpx.Client, alias: str, payload: dict, errors: list[str]) -> int | None:
    r = client.post(f"/{alias}", json=payload)
    if r.status_code == 201:
        return r.json()["id"]
    errors.append(f"{alias} {payload}: {r.status_code} {r.text[:80]}")
    return None


def main():
    ap = argparse.ArgumentParser(description="Seed the catalog via the admin API")
    ap.add_argument("--products", type=int, default=50, help="Number of products to create")
    ap.add_argument("--base-url", default=API_BASE, help="Admin models API base URL")
    args = ap.parse_args()

    errors: list[str] = []
    with httpx.Client(base_url=args.base_url, timeout=30.0) as client:
        category_ids = [_create(client, "categories", {"name": name}, errors) for name in CATEGORIES]
        tag_ids = [_create(client, "tags", {"name": name}, errors) for name in TAGS]
        category_ids = [i for i in category_ids if i is not None]
        tag_ids = [i for i in tag_ids if i is not None]
        print(f"Categories: {len(category_ids)}, tags: {len(tag_ids)}")

        created = 0
        for n in range(args.products):
            payload = {
                "title": f"{random.choice(TITLES)} {n + 1}",
                "price_cents": random.choice([99, 499, 999, 4999, 19999]),
                "opens_at": random.choice(OPENING_TIMES),
                "category_id": random.choice(category_ids) if category_ids else None,
                "tags": random.sample(tag_ids, k=min(len(tag_ids), random.randint(0, 3))),
            }
            if _create(client, "products", payload, errors) is not None:
                created += 1
        print(f"Products created: {created}")

    if errors:
        print(f"Errors ({len(errors)}):")
        for e in errors[:15]:
            print("  ", e)


if __name__ == "__main__":
    main()
