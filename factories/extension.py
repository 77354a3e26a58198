"""
Flask integration for model factories.

``Factories`` wires a ``Factory`` into an application: it builds the Faker
instance and the SQLAlchemy persister from configuration, loads definition
modules from ``FACTORY_PATHS`` and exposes the result as
``app.extensions['factories']`` (also reachable through ``current_factory``).
It also registers the ``flask factory`` command group.
"""

from typing import Optional

import click
from faker import Faker
from flask import Flask, current_app
from flask.cli import AppGroup
from flask_sqlalchemy import SQLAlchemy
from werkzeug.local import LocalProxy

from .exceptions import FactoryError
from .factory import Factory
from .logging import configure_logging, get_logger
from .persistence import SQLAlchemyPersister
from .registry import DEFAULT_DEFINITION


EXTENSION_NAME = 'factories'

logger = get_logger(__name__)


class Factories:
    """Flask extension registering a model factory on the application."""

    def __init__(self, app: Optional[Flask] = None, db: Optional[SQLAlchemy] = None) -> None:
        self.db = db
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask, db: Optional[SQLAlchemy] = None) -> Factory:
        """Initialize the factory with Flask application factory pattern."""
        db = db or self.db or app.extensions.get('sqlalchemy')
        if db is None:
            raise FactoryError(
                "Flask-SQLAlchemy must be initialised before the factories extension",
                error_code='SQLALCHEMY_NOT_INITIALIZED',
            )

        configure_logging(app.config.get('LOG_LEVEL'), app.config.get('LOG_RENDERER'))

        faker = Faker(app.config.get('FACTORY_FAKER_LOCALE', 'en_US'))
        seed = app.config.get('FACTORY_FAKER_SEED')
        if seed is not None:
            faker.seed_instance(int(seed))

        persister = SQLAlchemyPersister(db, app.config.get('FACTORY_PERSISTENCE', 'flush'))
        factory = Factory(faker, persister)

        for path in app.config.get('FACTORY_PATHS') or ():
            factory.load(path)

        app.extensions[EXTENSION_NAME] = factory
        app.teardown_appcontext(self._teardown)
        app.cli.add_command(factory_cli)

        logger.info(
            "factory.extension_initialised",
            models=[model.__name__ for model in factory.registry.models()],
            persistence=persister.mode,
        )
        return factory

    @staticmethod
    def _teardown(exception=None) -> None:
        factory = current_app.extensions.get(EXTENSION_NAME)
        if factory is not None and factory.persister is not None:
            factory.persister.close()


def _get_factory() -> Factory:
    return current_app.extensions[EXTENSION_NAME]


current_factory: Factory = LocalProxy(_get_factory)


factory_cli = AppGroup('factory', help='Build and persist model instances from factory definitions.')


@factory_cli.command('list')
def list_command():
    """List registered models with their definitions and states."""
    factory = _get_factory()
    models = factory.registry.models()
    if not models:
        click.echo('No factory definitions registered.')
        return

    for model in models:
        click.echo(f"{model.__module__}.{model.__qualname__}")
        click.echo(f"  definitions: {', '.join(factory.registry.definition_names(model))}")
        click.echo(f"  states: {', '.join(factory.registry.state_names(model)) or '-'}")


@factory_cli.command('create')
@click.argument('model')
@click.option('--times', '-t', type=int, default=None, help='Number of instances to create.')
@click.option('--state', '-s', 'states', multiple=True, help='State to apply; repeatable.')
@click.option('--name', '-n', default=DEFAULT_DEFINITION, show_default=True, help='Definition name.')
@click.option('--connection', '-c', default=None, help='Bind key to persist into.')
def create_command(model, times, states, name, connection):
    """Create MODEL instances and commit them."""
    factory = _get_factory()
    try:
        builder = factory.of(factory.resolve_model(model), name).states(list(states))
        if times is not None:
            builder.times(times)
        if connection:
            builder.connection(connection)
        results = builder.create()
        factory.persister.commit()
    except FactoryError as e:
        raise click.ClickException(e.message)

    instances = results if isinstance(results, list) else [results]
    keys = [factory.persister.get_key(instance) for instance in instances]
    click.echo(f"Created {len(instances)} {builder.model.__name__}: {keys}")


__all__ = ['Factories', 'current_factory', 'factory_cli', 'EXTENSION_NAME']
