"""Create or reset tables directly from the ORM metadata.

Handy for local SQLite databases; deployed databases should use
``reveal.scripts.migrate`` instead.
"""
from __future__ import annotations

import argparse
import logging

from reveal.core.settings import settings
from reveal.db.session import create_tables, drop_tables

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--reset", action="store_true", help="drop all tables first")
    args = parser.parse_args(argv)

    if args.reset:
        if settings.is_production:
            parser.error("refusing to drop tables when APP_ENV is production")
        drop_tables()
        logger.info("Dropped all tables")
    create_tables()
    logger.info("Database initialized.")


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level.upper())
    main()
