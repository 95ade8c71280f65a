"""Copy like counts out of an older storage layout, eagerly.

The KV backend also does this lazily on first use; run this after a deploy
to do it up front and see what was copied.

Usage:
    python -m class_likes.tools.migrate_legacy
    python -m class_likes.tools.migrate_legacy --backend kv
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from class_likes.adapters.counter_store.factory import build_counter_backend
from class_likes.config import settings
from class_likes.domain.value_objects.enums import BackendKind

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)


async def migrate(kind: BackendKind | None = None) -> int:
    backend = build_counter_backend(settings, kind)
    try:
        copied = await backend.migrate_legacy()
        snapshot = await backend.get_all()
    finally:
        await backend.aclose()
    logger.info("Backend '%s': %d counters copied, %d counters total", backend.name, copied, len(snapshot))
    return copied


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Migrate legacy like counters")
    parser.add_argument(
        "--backend",
        choices=[k.value for k in BackendKind],
        help="Backend to migrate (default: the one the service would select)",
    )
    args = parser.parse_args(argv)

    try:
        asyncio.run(migrate(BackendKind(args.backend) if args.backend else None))
    except Exception:
        logger.exception("Migration failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
