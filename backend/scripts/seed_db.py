"""CLI script to create the tables and seed default data.
Usage: python scripts/seed_db.py [--skip-create]
"""
import sys
import argparse
import logging
import pathlib
# Ensure `backend/` is on sys.path so `app` package imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session
from app.config import settings
from app.database import engine, create_db_and_tables
from app.seeds import seed_all


def main(skip_create: bool = False):
    """Create missing tables (unless skipped) and run every seeder.

    Results are printed to stdout for a quick CLI feedback loop.
    """
    logging.basicConfig(level=settings.LOG_LEVEL)
    print("Using database:", settings.DATABASE_URL)
    if not skip_create:
        create_db_and_tables()
    with Session(engine) as session:
        created = seed_all(session)
    print(f'Seeded {created} records')


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--skip-create', action='store_true', help='Do not create missing tables first')
    args = parser.parse_args()
    main(skip_create=args.skip_create)
