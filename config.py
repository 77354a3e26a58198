"""
Configuration Management

Environment-specific configuration classes for development, testing and
production. Values come from the process environment, optionally populated
from ``.env`` files through python-dotenv by the application factory.

Factory settings:
- FACTORY_PATHS: directories of factory definition modules (os.pathsep separated)
- FACTORY_FAKER_LOCALE: Faker locale used for generated values
- FACTORY_FAKER_SEED: optional integer seed for reproducible data
- FACTORY_PERSISTENCE: ``flush`` or ``commit`` after each saved instance
"""

import json
import logging
import os
from typing import Dict, List, Optional


def _split_paths(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [part for part in value.split(os.pathsep) if part.strip()]


def _parse_binds(value: Optional[str]) -> Dict[str, str]:
    """Parse SQLALCHEMY_BINDS given as a JSON object of bind key to URI."""
    if not value:
        return {}
    try:
        binds = json.loads(value)
    except ValueError:
        logging.warning("Configuration warning: SQLALCHEMY_BINDS is not valid JSON")
        return {}
    if not isinstance(binds, dict):
        logging.warning("Configuration warning: SQLALCHEMY_BINDS must be a JSON object")
        return {}
    return binds


def _optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or value == '':
        return None
    try:
        return int(value)
    except ValueError:
        logging.warning(f"Configuration warning: expected an integer, got {value!r}")
        return None


class Config:
    """
    Base configuration class containing common settings for all environments.
    """

    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-key-change-in-production'

    # Database Configuration
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///factories.db'
    SQLALCHEMY_BINDS = _parse_binds(os.environ.get('SQLALCHEMY_BINDS'))
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
    }

    # Factory Configuration
    FACTORY_PATHS = _split_paths(os.environ.get('FACTORY_PATHS'))
    FACTORY_FAKER_LOCALE = os.environ.get('FACTORY_FAKER_LOCALE', 'en_US')
    FACTORY_FAKER_SEED = _optional_int(os.environ.get('FACTORY_FAKER_SEED'))
    FACTORY_PERSISTENCE = os.environ.get('FACTORY_PERSISTENCE', 'flush')

    # Logging Configuration
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_RENDERER = os.environ.get('LOG_RENDERER', 'json')

    @staticmethod
    def init_app(app):
        """
        Initialize application with configuration-specific settings.

        Args:
            app: Flask application instance
        """
        pass

    @classmethod
    def validate_required_config(cls) -> bool:
        """
        Validate that required configuration values are usable.

        Returns:
            bool: True if all required configuration is valid, False otherwise
        """
        if cls.FACTORY_PERSISTENCE not in ('flush', 'commit'):
            logging.warning(
                f"Configuration warning: FACTORY_PERSISTENCE must be 'flush' or 'commit', "
                f"got {cls.FACTORY_PERSISTENCE!r}"
            )
            return False

        for path in cls.FACTORY_PATHS:
            if not os.path.isdir(path):
                logging.warning(f"Configuration warning: factory path {path} does not exist")
                return False

        return True


class DevelopmentConfig(Config):
    """Development environment configuration with verbose console logging."""

    DEBUG = True
    TESTING = False

    SQLALCHEMY_ECHO = os.environ.get('SQLALCHEMY_ECHO', 'false').lower() == 'true'

    LOG_LEVEL = 'DEBUG'
    LOG_RENDERER = 'console'

    @staticmethod
    def init_app(app):
        """Initialize development-specific settings."""
        Config.init_app(app)
        app.logger.info("Development configuration loaded")
        if not DevelopmentConfig.validate_required_config():
            app.logger.warning("Some configuration values are using defaults")


class TestingConfig(Config):
    """
    Testing environment configuration.

    Uses in-memory SQLite for the primary database and an ``archive`` bind so
    connection overrides can be exercised without external services.
    """

    TESTING = True
    DEBUG = False

    SQLALCHEMY_DATABASE_URI = os.environ.get('TEST_DATABASE_URL') or 'sqlite://'
    SQLALCHEMY_BINDS = {'archive': 'sqlite://'}
    SQLALCHEMY_ENGINE_OPTIONS = {}

    FACTORY_PATHS = []
    FACTORY_FAKER_SEED = 1234

    LOG_LEVEL = 'WARNING'

    @staticmethod
    def init_app(app):
        """Initialize testing-specific settings."""
        Config.init_app(app)


class ProductionConfig(Config):
    """
    Production-like configuration for seeding shared environments.

    Instances are committed one by one so a failed run leaves the rows created
    so far in place.
    """

    DEBUG = False
    TESTING = False

    FACTORY_PERSISTENCE = os.environ.get('FACTORY_PERSISTENCE', 'commit')

    LOG_LEVEL = 'INFO'

    @staticmethod
    def init_app(app):
        """Initialize production-specific settings."""
        Config.init_app(app)

        if not ProductionConfig.validate_required_config():
            app.logger.error("Production configuration validation failed")
            raise RuntimeError("Invalid production configuration")


# Configuration mapping for environment-based selection
config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}


def get_config(config_name: Optional[str] = None) -> Config:
    """
    Get configuration class based on environment name.

    Args:
        config_name: Name of the configuration environment

    Returns:
        Config: Configuration class for the specified environment
    """
    if config_name is None:
        config_name = os.environ.get('FLASK_CONFIG', 'default')

    return config.get(config_name, DevelopmentConfig)


__all__ = [
    'Config',
    'DevelopmentConfig',
    'TestingConfig',
    'ProductionConfig',
    'config',
    'get_config',
]
