"""
Flask Application Factory

Builds a Flask application with Flask-SQLAlchemy and the model factories
extension wired in, so definitions can be used from tests, shell sessions and
the ``flask factory`` CLI group.

Example:
    from app import create_app
    app = create_app('development')

    with app.app_context():
        current_factory.of(User).times(10).create()
"""

import logging
import os
import traceback
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_config
from factories import Factories
from factories.logging import configure_logging
from models import db


# Configure module-level logging
logger = logging.getLogger(__name__)

factories = Factories()


class FlaskApplicationError(Exception):
    """Custom exception for Flask application initialization errors."""

    def __init__(self, message: str, error_code: str = None, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


def load_environment_variables() -> None:
    """
    Load environment variables from .env files using python-dotenv.

    Environment Search Order:
        1. .env (default environment settings)
        2. .env.{FLASK_ENV} (environment-specific settings)
        3. .env.local (local overrides)
    System environment variables always take precedence.
    """
    flask_env = os.environ.get('FLASK_ENV', 'development')

    for env_file in ('.env', f'.env.{flask_env}', '.env.local'):
        if Path(env_file).exists():
            load_dotenv(env_file, override=False)
            logger.debug(f"Loaded environment file: {env_file}")


def create_app(config_name: Optional[str] = None,
               config_overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    """
    Flask application factory.

    Args:
        config_name: Environment configuration name ('development', 'testing', 'production').
                     If None, determined from FLASK_CONFIG environment variable
        config_overrides: Settings applied on top of the configuration class,
                          before any extension is initialised

    Returns:
        Flask: Configured application with ``db`` and the factories extension

    Raises:
        FlaskApplicationError: If application initialization fails
    """
    load_environment_variables()

    try:
        app = Flask(__name__)

        config_class = get_config(config_name)
        app.config.from_object(config_class)
        if config_overrides:
            app.config.update(config_overrides)

        config_class.init_app(app)

        configure_logging(app.config.get('LOG_LEVEL'), app.config.get('LOG_RENDERER'), force=True)

        db.init_app(app)
        factories.init_app(app, db)

        logger.info(f"Flask application created with {config_class.__name__} configuration")
        return app

    except FlaskApplicationError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error during application factory initialization: {e}")
        raise FlaskApplicationError(
            f"Application factory initialization failed: {str(e)}",
            error_code="FACTORY_INIT_ERROR",
            details={'error': str(e), 'traceback': traceback.format_exc()}
        )


__all__ = ['create_app', 'factories', 'FlaskApplicationError']
