"""Catalog seeding CLI — ``survey-seed``.

Loads the question catalog YAML and upserts every question into the
``questions`` table.  Safe to run repeatedly: existing questions are
updated in place, never deleted, so stored responses keep their foreign
keys.

Examples::

    # Seed the bundled catalog
    uv run survey-seed

    # Seed a custom catalog file
    uv run survey-seed --catalog ./questions.yaml

    # Also retire active questions that are no longer in the file
    uv run survey-seed --reset
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

logger = logging.getLogger(__name__)


async def run_seed(
    *,
    catalog_path: str | None = None,
    reset: bool = False,
) -> int:
    """Upsert the catalog and return the number of questions written.

    Runs as one transaction: either every question is written or none.
    """
    # Lazy imports to avoid loading DB machinery at module import time
    from survey_core.catalog import QuestionCatalog
    from survey_core.service import EvaluationService
    from survey_db.engine import dispose_engine, session_scope

    catalog = QuestionCatalog(catalog_path)
    catalog.load()
    service = EvaluationService()

    try:
        async with session_scope() as db:
            written = await service.sync_catalog(db, catalog, deactivate_missing=reset)

        logger.info(
            "Seed complete: questions=%d, source=%s, reset=%s",
            written, catalog.path, reset,
        )
        return written
    finally:
        await dispose_engine()


def cli() -> None:
    """Console-script entry point: ``survey-seed``."""
    parser = argparse.ArgumentParser(
        prog="survey-seed",
        description="Load the survey question catalog into the database.",
    )
    parser.add_argument(
        "--catalog",
        default=os.getenv("SERVER_CATALOG_PATH") or None,
        help="Catalog YAML file (default: $SERVER_CATALOG_PATH or the bundled catalog)",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        default=False,
        help="Deactivate active questions that are not in the catalog file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    written = asyncio.run(run_seed(catalog_path=args.catalog, reset=args.reset))

    print(f"Questions seeded: {written}")
    sys.exit(0)
