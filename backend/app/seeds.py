"""Initial data for empty databases.

Seeders run in ascending `order`; each one only writes when its table has
no rows at all (soft-deleted rows count), so reruns are harmless. A
failing seeder stops the run.
"""

import logging
from typing import Iterable, List, Optional, Type

from sqlmodel import Session

from . import models, repositories, services

logger = logging.getLogger("app.seeds")

DEFAULT_TECHNOLOGIES = [
    ("C#", "A modern, object-oriented programming language developed by Microsoft.", models.TechnologyType.LANGUAGE),
    ("JavaScript", "A versatile scripting language for web development.", models.TechnologyType.LANGUAGE),
    ("TypeScript", "A typed superset of JavaScript that compiles to plain JavaScript.", models.TechnologyType.LANGUAGE),
    ("Python", "A high-level, interpreted programming language known for its readability.", models.TechnologyType.LANGUAGE),
    ("ASP.NET Core", "A cross-platform, high-performance framework for building modern web applications.", models.TechnologyType.FRAMEWORK),
    ("Angular", "A platform for building mobile and desktop web applications.", models.TechnologyType.FRAMEWORK),
    ("React", "A JavaScript library for building user interfaces.", models.TechnologyType.FRAMEWORK),
    ("Entity Framework Core", "A modern object-database mapper for .NET.", models.TechnologyType.LIBRARY),
    ("PostgreSQL", "A powerful, open source object-relational database system.", models.TechnologyType.DATABASE),
    ("SQL Server", "A relational database management system developed by Microsoft.", models.TechnologyType.DATABASE),
    ("Docker", "A platform for developing, shipping, and running applications in containers.", models.TechnologyType.TOOL),
    ("Git", "A distributed version control system for tracking changes in source code.", models.TechnologyType.TOOL),
]


class TechnologySeeder:
    """Insert the default technology catalogue."""
    order = 1

    def __init__(self, session: Session):
        self.session = session

    def seed(self) -> int:
        """Seed the table if it is empty and return the number of rows written."""
        if repositories.TechnologyRepository(self.session).get_all():
            logger.info("technology table already has data, skipping seed")
            return 0
        service = services.TechnologyService(self.session)
        for name, description, technology_type in DEFAULT_TECHNOLOGIES:
            service.create(
                models.Technology(name=name, description=description, technology_type=technology_type),
                commit=False,
            )
        self.session.commit()
        logger.info("technology table seeded with %d records", len(DEFAULT_TECHNOLOGIES))
        return len(DEFAULT_TECHNOLOGIES)


SEEDERS: List[Type] = [TechnologySeeder]


def seed_all(session: Session, seeders: Optional[Iterable[Type]] = None) -> int:
    """Run every seeder in order and return the total rows written."""
    ordered = sorted(seeders if seeders is not None else SEEDERS, key=lambda s: s.order)
    if not ordered:
        logger.info("no seeders registered")
        return 0
    logger.info("starting database seeding")
    total = 0
    for seeder_cls in ordered:
        logger.info("running seeder %s", seeder_cls.__name__)
        try:
            total += seeder_cls(session).seed()
        except Exception:
            logger.exception("seeder %s failed", seeder_cls.__name__)
            session.rollback()
            raise
    logger.info("database seeding completed")
    return total
