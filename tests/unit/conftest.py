"""
Fixtures for database-free factory tests.

The ``factory`` fixture here replaces the application-backed one from the
top-level conftest: builders run against ``Record`` models and an
``InMemoryPersister``, so no Flask application is created.
"""

import pytest
from faker import Faker
from structlog.testing import capture_logs

from factories import Factory
from factories.logging import configure_logging
from tests.helpers import Article, Author, InMemoryPersister


@pytest.fixture
def faker():
    fake = Faker()
    fake.seed_instance(1234)
    return fake


@pytest.fixture
def persister():
    return InMemoryPersister()


@pytest.fixture
def factory(faker, persister):
    """Factory with ``Author`` and ``Article`` definitions registered."""
    factory = Factory(faker, persister)

    factory.define(Author, lambda faker, attributes: {
        'name': 'X',
        'active': False,
        'email': faker.email(),
    })
    factory.state(Author, 'admin', {'active': True})

    factory.define(Article, lambda faker, attributes: {
        'title': faker.sentence(),
        'author_id': factory.of(Author),
    })

    return factory


@pytest.fixture
def debug_logs():
    """Capture structlog events at debug level."""
    configure_logging(level='DEBUG', force=True)
    with capture_logs() as logs:
        yield logs
    configure_logging(force=True)
