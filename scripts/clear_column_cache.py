#!/usr/bin/env python3
"""
Drop cached column listings after a migration so search sees new columns
before the 24h TTL runs out.
  python scripts/clear_column_cache.py
"""

import asyncio

from admin_panel.admin.bootstrap import register_catalog
from admin_panel.cache.redis_client import cache_delete
from admin_panel.config import get_settings


async def clear() -> None:
    settings = get_settings()
    for item in register_catalog().all():
        table = item.model.__tablename__
        ok = await cache_delete(settings.column_cache_prefix + table)
        print(f"{table}: {'cleared' if ok else 'failed'}")


if __name__ == "__main__":
    asyncio.run(clear())
