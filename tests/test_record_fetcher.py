"""
Record fetcher tests

Checks owner scoping, query composition for embeds and error translation.
The database layer is mocked; no server is needed.
"""

import pytest
import sys
import os
from unittest.mock import patch

import psycopg2
from psycopg2 import sql

# Add the project root to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from bizhub.errors import BackendError
from bizhub.services.record_fetcher import (
    ASSOCIATE_EMBED,
    JOB_EMBEDS,
    RecordFetcher,
)
from bizhub.utils.database import Database


def flatten(composable):
    """Yield the leaf composables of a psycopg2.sql tree"""
    if isinstance(composable, sql.Composed):
        for part in composable.seq:
            yield from flatten(part)
    else:
        yield composable


def sql_text(composable):
    return " ".join(part.string for part in flatten(composable) if isinstance(part, sql.SQL))


def identifiers(composable):
    return [part.strings for part in flatten(composable) if isinstance(part, sql.Identifier)]


class TestOwnerScoping:
    """Reads must carry the owner filter"""

    def test_missing_owner_filter_rejected(self):
        database = Database()
        fetcher = RecordFetcher(database)

        with patch.object(database, 'execute_query') as mock_query:
            with pytest.raises(ValueError):
                fetcher.fetch('organizations', {'classification': 'customer'})
            with pytest.raises(ValueError):
                fetcher.fetch('organizations', {'user_id': None})
            mock_query.assert_not_called()

    def test_filters_bound_as_parameters(self):
        database = Database()
        fetcher = RecordFetcher(database)

        with patch.object(database, 'execute_query') as mock_query:
            mock_query.return_value = [{'id': 'o1', 'name': 'Acme'}]

            rows = fetcher.fetch('organizations', {'user_id': 'p1', 'classification': 'associate'})

            assert rows == [{'id': 'o1', 'name': 'Acme'}]
            query, params = mock_query.call_args[0]
            assert params == ['p1', 'associate']
            assert ('t', 'user_id') in identifiers(query)
            assert ('t', 'classification') in identifiers(query)
            assert ('organizations',) in identifiers(query)


class TestQueryComposition:
    """Embeds become correlated JSON sub-selects"""

    def test_many_embed_aggregates(self):
        query, _ = RecordFetcher(Database()).build_query(
            'organizations', {'user_id': 'p1'}, (ASSOCIATE_EMBED,)
        )

        text = sql_text(query)
        assert 'json_agg' in text
        assert 'LIMIT 1' not in text
        assert ('e', 'organization_id') in identifiers(query)
        assert ('t', 'id') in identifiers(query)
        assert ('associates',) in identifiers(query)

    def test_single_embeds_limited(self):
        query, params = RecordFetcher(Database()).build_query('jobs', {'user_id': 'p1'}, JOB_EMBEDS)

        text = sql_text(query)
        assert text.count('LIMIT 1') == 3
        assert 'json_agg' not in text
        assert ('t', 'customer_id') in identifiers(query)
        assert ('t', 'assigned_person_id') in identifiers(query)
        assert params == ['p1']


class TestErrors:
    """Driver errors surface as BackendError"""

    def test_driver_error_wrapped(self):
        database = Database()
        fetcher = RecordFetcher(database)

        with patch.object(database, 'execute_query') as mock_query:
            mock_query.side_effect = psycopg2.OperationalError('connection refused')

            with pytest.raises(BackendError) as exc_info:
                fetcher.fetch('jobs', {'user_id': 'p1'})

            assert 'connection refused' in str(exc_info.value)
            assert isinstance(exc_info.value.__cause__, psycopg2.OperationalError)

    def test_pool_not_opened_on_construction(self):
        """Constructing the manager never touches the network"""
        assert Database().pool is None
