"""
Pytest Configuration and Fixtures for Model Factory Testing

Provides the Flask application, database and factory fixtures shared by the
integration tests. Every test gets a fresh application backed by in-memory
SQLite: the primary database plus an ``archive`` bind used to exercise
connection overrides. Factory definitions are loaded from
``tests/definitions`` through the ``FACTORY_PATHS`` setting.

Unit tests under ``tests/unit`` override the ``factory`` fixture with a
database-free factory (see ``tests/unit/conftest.py``).
"""

import sys
from pathlib import Path

import pytest

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app import create_app
from factories import current_factory
from models import db

DEFINITIONS_PATH = Path(__file__).parent / 'definitions'


# =============================================================================
# PYTEST CONFIGURATION AND MARKERS
# =============================================================================

def pytest_configure(config):
    """Register custom markers for test categorization."""
    config.addinivalue_line(
        "markers",
        "unit: Unit tests for builders and registries without a database"
    )
    config.addinivalue_line(
        "markers",
        "integration: Tests running against Flask-SQLAlchemy and SQLite"
    )
    config.addinivalue_line(
        "markers",
        "cli: Tests for the flask factory command group"
    )


def pytest_collection_modifyitems(config, items):
    """Apply markers based on test location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)

        if "cli" in item.name:
            item.add_marker(pytest.mark.cli)


# =============================================================================
# FLASK APPLICATION FIXTURES
# =============================================================================

@pytest.fixture
def app_overrides():
    """
    Configuration applied on top of TestingConfig.

    Tests can override this fixture to change factory settings.
    """
    return {
        'FACTORY_PATHS': [str(DEFINITIONS_PATH)],
    }


@pytest.fixture
def app(app_overrides):
    """
    Create Flask application instance with testing configuration.

    Yields:
        Flask application with an active app context and created tables
    """
    app = create_app(config_name='testing', config_overrides=app_overrides)

    with app.app_context():
        db.create_all()
        db.metadata.create_all(bind=db.engines['archive'])

        yield app

        db.session.remove()
        db.drop_all()


@pytest.fixture
def runner(app):
    """Provide Flask CLI test runner for command testing."""
    return app.test_cli_runner()


# =============================================================================
# DATABASE AND FACTORY FIXTURES
# =============================================================================

@pytest.fixture
def database(app):
    """Provide the Flask-SQLAlchemy instance bound to the test application."""
    return db


@pytest.fixture
def factory(app):
    """Provide the factory registered on the test application."""
    return current_factory._get_current_object()


@pytest.fixture
def archive_session(factory):
    """Session on the ``archive`` bind used by connection overrides."""
    return factory.persister.session('archive')
