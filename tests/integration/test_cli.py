"""
Integration Tests for the ``flask factory`` command group
"""

import pytest

from tests.models import User


pytestmark = pytest.mark.integration


class TestListCommand:

    def test_cli_list_shows_models_and_states(self, runner):
        result = runner.invoke(args=['factory', 'list'])

        assert result.exit_code == 0
        assert 'tests.models.User' in result.output
        assert 'tests.models.Post' in result.output
        assert 'states: admin, active' in result.output
        assert 'definitions: default' in result.output

    @pytest.mark.parametrize('app_overrides', [{'FACTORY_PATHS': []}])
    def test_cli_list_without_definitions(self, runner):
        result = runner.invoke(args=['factory', 'list'])

        assert result.exit_code == 0
        assert 'No factory definitions registered.' in result.output


class TestCreateCommand:

    def test_cli_create_single(self, runner, database):
        result = runner.invoke(args=['factory', 'create', 'User'])

        assert result.exit_code == 0, result.output
        assert 'Created 1 User: [1]' in result.output
        assert database.session.query(User).count() == 1

    def test_cli_create_with_times_and_states(self, runner, database):
        result = runner.invoke(args=['factory', 'create', 'tests.models.User', '--times', '2', '-s', 'admin'])

        assert result.exit_code == 0, result.output
        assert 'Created 2 User' in result.output
        assert database.session.query(User).filter_by(is_admin=True).count() == 2

    def test_cli_create_into_connection(self, runner, factory, database):
        result = runner.invoke(args=['factory', 'create', 'User', '--connection', 'archive'])

        assert result.exit_code == 0, result.output
        assert factory.persister.session('archive').query(User).count() == 1
        assert database.session.query(User).count() == 0

    def test_cli_create_unknown_model(self, runner):
        result = runner.invoke(args=['factory', 'create', 'Ghost'])

        assert result.exit_code == 1
        assert 'No factory is registered for model [Ghost].' in result.output

    def test_cli_create_unknown_state(self, runner, database):
        result = runner.invoke(args=['factory', 'create', 'User', '--state', 'ghost'])

        assert result.exit_code == 1
        assert 'Unable to locate [ghost] state for [User].' in result.output
        assert database.session.query(User).count() == 0

    def test_cli_create_unknown_definition(self, runner):
        result = runner.invoke(args=['factory', 'create', 'User', '--name', 'missing'])

        assert result.exit_code == 1
        assert 'Unable to locate factory with name [missing] [User].' in result.output
