"""
Create any missing tables straight from the models, without Alembic.
Useful for a fresh SQLite database. Run from the repository root with .env loaded.

Usage:
  python scripts/create_tables.py
"""
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.core.logging import setup_logging
from app.db.session import create_tables, engine


def main():
    setup_logging()
    logger = logging.getLogger("create_tables")
    try:
        create_tables()
    except Exception:
        logger.exception("Table creation failed")
        sys.exit(1)
    logger.info("Tables ready on %s", engine.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    main()
