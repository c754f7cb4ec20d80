"""
Core component tests

Configuration, logging setup, error taxonomy and query result states.
"""

import logging
import sys
import os

# Add the project root to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from bizhub.errors import BackendError, NotAuthenticated, QueryTimeout, ValidationError
from bizhub.models import QueryResult, QueryStatus
from bizhub.utils.config import Settings, get_settings, settings
from bizhub.utils.log_config import configure_logging


class TestConfiguration:
    """pydantic-settings configuration"""

    def test_defaults(self):
        config = Settings()

        assert config.DB_PORT == 5432
        assert config.QUERY_TIMEOUT_SECONDS > 0
        assert config.HTTP_TIMEOUT_SECONDS > 0
        assert get_settings() is settings

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv('API_BASE_URL', 'https://api.bizhub.test')
        monkeypatch.setenv('QUERY_TIMEOUT_SECONDS', '2.5')

        config = Settings()

        assert config.API_BASE_URL == 'https://api.bizhub.test'
        assert config.QUERY_TIMEOUT_SECONDS == 2.5

    def test_configure_logging(self):
        root = logging.getLogger()
        previous = root.level
        try:
            configure_logging('debug')
            assert root.level == logging.DEBUG
            configure_logging('not-a-level')
            assert root.level == logging.INFO
        finally:
            root.setLevel(previous)


class TestErrors:
    """Error taxonomy"""

    def test_kinds(self):
        assert NotAuthenticated().kind == 'not_authenticated'
        assert BackendError('x').kind == 'backend'
        assert ValidationError('x', status_code=400).status_code == 400
        assert str(QueryTimeout()) == 'Timeout'


class TestQueryResult:
    """Tri-state results"""

    def test_states(self):
        assert QueryResult.loading().status == QueryStatus.LOADING

        success = QueryResult.success(['a'], request_id=3)
        assert success.is_success and success.data == ['a'] and success.request_id == 3

        failure = QueryResult.failure(NotAuthenticated())
        assert failure.is_error
        assert failure.error == 'User not authenticated'
        assert failure.error_kind == 'not_authenticated'
