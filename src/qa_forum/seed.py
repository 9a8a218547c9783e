"""Command line entry point that seeds reference data.

Usage::

    qa-forum-seed [--promote-owner USERNAME]
"""

import argparse
import asyncio
import logging

from qa_forum.database import async_session
from qa_forum.services.catalog import seed_reference_data
from qa_forum.services.users import promote_to_owner

logger = logging.getLogger(__name__)


async def run(promote_owner: str | None = None) -> None:
    """Seed categories and FAQs, then optionally promote a user to owner."""
    async with async_session() as session, session.begin():
        await seed_reference_data(session)
        if promote_owner:
            await promote_to_owner(session, promote_owner)


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed forum categories and FAQs.")
    parser.add_argument(
        "--promote-owner",
        metavar="USERNAME",
        help="make this existing user the forum owner",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run(args.promote_owner))


if __name__ == "__main__":
    main()
