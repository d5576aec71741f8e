# This project was developed with assistance from AI tools.
"""CLI entrypoint for service catalog seeding.

Usage:
    python -m localaid.seed          # Upsert the catalog
    python -m localaid.seed --force  # Clear and re-seed
"""

import argparse
import asyncio
import json
import logging

from db.database import SessionLocal

from .services.seed.seeder import seed_catalog


async def main(force: bool = False) -> None:
    """Run catalog seeding."""
    async with SessionLocal() as session:
        result = await seed_catalog(session, force=force)
        print(json.dumps(result, indent=2, default=str))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the LocalAid service catalog")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Clear existing catalog rows and re-seed",
    )
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main(force=args.force))
