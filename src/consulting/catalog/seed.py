"""Starter catalogue loaded by ``manage.py seed-services``."""

import structlog

from consulting.catalog.service import Service

logger = structlog.get_logger(__name__)

STARTER_SERVICES = [
    {
        "title": "Market Entry Strategy",
        "description": "Market landscape analysis and a recommended route for entering or expanding in a new region.",
        "category": "Businesses",
        "duration": "60 min",
        "price": 150,
        "rating": 4.9,
    },
    {
        "title": "Digital Transformation",
        "description": "Planning and rollout of digital initiatives that lift operational efficiency and customer reach.",
        "category": "Businesses",
        "duration": "90 min",
        "price": 200,
        "rating": 4.8,
    },
    {
        "title": "Growth Planning",
        "description": "Actionable plans for market expansion and revenue growth.",
        "category": "Businesses",
        "duration": "120 min",
        "price": 250,
        "rating": 4.9,
    },
    {
        "title": "Medical Practice Management",
        "description": "Operational support for practices that want better patient flow and lower costs.",
        "category": "Healthcare",
        "duration": "60 min",
        "price": 100,
        "rating": 4.7,
    },
    {
        "title": "Patient Care Optimization",
        "description": "Patient engagement and care delivery changes that improve satisfaction and retention.",
        "category": "Healthcare",
        "duration": "90 min",
        "price": 120,
        "rating": 4.8,
    },
]


def seed_services(domain, entries=None) -> int:
    """Replace the catalogue with ``entries`` (the starter set by default)."""
    entries = STARTER_SERVICES if entries is None else entries
    repo = domain.repository_for(Service)

    for existing in repo.everything():
        repo._dao.delete(existing)
    for entry in entries:
        repo.add(Service.publish(**entry))

    logger.info("Service catalogue seeded", count=len(entries))
    return len(entries)
