"""
Integration Tests for the Flask factories extension and application factory
"""

import pytest
from flask import Flask

from app import FlaskApplicationError, create_app
from factories import Factories, Factory, FactoryError, SQLAlchemyPersister, current_factory
from factories.extension import EXTENSION_NAME
from tests.models import User


pytestmark = pytest.mark.integration


class TestExtension:

    def test_factory_registered_on_app(self, app):
        factory = app.extensions[EXTENSION_NAME]

        assert isinstance(factory, Factory)
        assert isinstance(factory.persister, SQLAlchemyPersister)
        assert factory.persister.mode == 'flush'

    def test_current_factory_proxy(self, app):
        assert current_factory._get_current_object() is app.extensions[EXTENSION_NAME]
        assert User in current_factory

    def test_requires_sqlalchemy(self):
        with pytest.raises(FactoryError) as exc_info:
            Factories(Flask('bare'))

        assert exc_info.value.error_code == 'SQLALCHEMY_NOT_INITIALIZED'

    def test_teardown_closes_connection_sessions(self, app):
        factory = app.extensions[EXTENSION_NAME]

        with app.app_context():
            session = factory.persister.session('archive')

        assert factory.persister.session('archive') is not session

    def test_seeded_faker_is_reproducible(self, app_overrides):
        names = []
        for _ in range(2):
            app = create_app(config_name='testing', config_overrides=app_overrides)
            with app.app_context():
                names.append(current_factory.raw(User)['name'])

        assert names[0] == names[1]

    def test_faker_locale(self, app_overrides):
        overrides = dict(app_overrides, FACTORY_FAKER_LOCALE='de_DE')
        app = create_app(config_name='testing', config_overrides=overrides)

        with app.app_context():
            assert current_factory.faker.locales == ['de_DE']


class TestCreateApp:

    def test_testing_configuration(self, app):
        assert app.config['TESTING'] is True
        assert 'archive' in app.config['SQLALCHEMY_BINDS']

    def test_invalid_factory_path(self, tmp_path):
        with pytest.raises(FlaskApplicationError) as exc_info:
            create_app('testing', {'FACTORY_PATHS': [str(tmp_path / 'missing')]})

        assert exc_info.value.error_code == 'FACTORY_INIT_ERROR'

    def test_without_factory_paths(self):
        app = create_app('testing')

        with app.app_context():
            assert current_factory.registry.models() == []
