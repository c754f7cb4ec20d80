"""
Record Fetcher

Reads a named collection from the backend database with an equality filter
and optional embedded joins, returning raw rows as dictionaries. Every read
must be scoped to an owner; the fetcher refuses filters without one.
"""

import logging
from dataclasses import dataclass
from typing import List, Dict, Any, Optional, Sequence, Tuple

import psycopg2
from psycopg2 import sql

from bizhub.errors import BackendError
from bizhub.utils.database import Database, db

logger = logging.getLogger(__name__)

OWNER_COLUMN = "user_id"


@dataclass(frozen=True)
class EmbedSpec:
    """A nested sub-collection returned inline with each parent row.

    Rows of ``name`` whose ``foreign_key`` equals the parent's ``local_key``
    are embedded under the key ``name``: as a list when ``many`` is set,
    otherwise as a single dict (or None when there is no match).
    """

    name: str
    columns: Tuple[str, ...]
    local_key: str
    foreign_key: str
    many: bool = False


class RecordFetcher:
    """Issues owner-scoped reads against backend collections"""

    def __init__(self, database: Optional[Database] = None):
        self.database = database or db

    def fetch(
        self,
        collection: str,
        filters: Dict[str, Any],
        embed: Optional[Sequence[EmbedSpec]] = None
    ) -> List[Dict[str, Any]]:
        """
        Fetch rows of a collection.

        Args:
            collection: Table name
            filters: Column -> value equality predicates, combined with AND.
                Must include the owner column.
            embed: Sub-collections to return inline with each row

        Returns:
            Raw rows; order is whatever the backend returns

        Raises:
            ValueError: If filters are not scoped to an owner
            BackendError: If the read fails
        """
        if not filters.get(OWNER_COLUMN):
            raise ValueError(f"Refusing to read {collection} without a {OWNER_COLUMN} filter")

        query, params = self.build_query(collection, filters, embed or ())
        try:
            rows = self.database.fetch_rows(query, params)
        except psycopg2.Error as e:
            logger.error(f"Failed to fetch {collection}: {e}")
            raise BackendError(str(e).strip() or f"Failed to fetch {collection}") from e

        logger.debug(f"Fetched {len(rows)} {collection} rows (filters={sorted(filters)})")
        return rows

    def build_query(
        self,
        collection: str,
        filters: Dict[str, Any],
        embed: Sequence[EmbedSpec]
    ) -> Tuple[sql.Composed, List[Any]]:
        """Compose the SELECT and its bound parameters"""
        columns = [sql.SQL("t.*")]
        columns.extend(self._embed_column(spec) for spec in embed)

        conditions = sql.SQL(" AND ").join(
            sql.SQL("{} = %s").format(sql.Identifier("t", column)) for column in filters
        )
        query = sql.SQL("SELECT {columns} FROM {table} AS t WHERE {conditions}").format(
            columns=sql.SQL(", ").join(columns),
            table=sql.Identifier(collection),
            conditions=conditions,
        )
        return query, list(filters.values())

    def _embed_column(self, spec: EmbedSpec) -> sql.Composed:
        """Correlated sub-select that renders one embed as JSON"""
        pairs = sql.SQL(", ").join(
            sql.SQL("{}, {}").format(sql.Literal(column), sql.Identifier("e", column))
            for column in spec.columns
        )
        record = sql.SQL("json_build_object({})").format(pairs)
        if spec.many:
            selected = sql.SQL("COALESCE(json_agg({}), '[]'::json)").format(record)
            limit = sql.SQL("")
        else:
            selected = record
            limit = sql.SQL(" LIMIT 1")

        return sql.SQL("(SELECT {selected} FROM {table} AS e WHERE {fk} = {lk}{limit}) AS {alias}").format(
            selected=selected,
            table=sql.Identifier(spec.name),
            fk=sql.Identifier("e", spec.foreign_key),
            lk=sql.Identifier("t", spec.local_key),
            limit=limit,
            alias=sql.Identifier(spec.name),
        )


# Embeds used by the directory queries
ASSOCIATE_EMBED = EmbedSpec(
    name="associates",
    columns=(
        "id",
        "availability",
        "hourly_rate",
        "rating",
        "completed_jobs",
        "skills",
        "certifications",
        "location_lat",
        "location_lng",
        "joined_at",
    ),
    local_key="id",
    foreign_key="organization_id",
    many=True,
)

PERSON_ORGANIZATION_EMBED = EmbedSpec(
    name="organizations", columns=("name",), local_key="organization_id", foreign_key="id"
)

JOB_EMBEDS = (
    EmbedSpec(name="customers", columns=("name",), local_key="customer_id", foreign_key="id"),
    EmbedSpec(
        name="people",
        columns=("first_name", "last_name"),
        local_key="assigned_person_id",
        foreign_key="id",
    ),
    EmbedSpec(name="organizations", columns=("name",), local_key="organization_id", foreign_key="id"),
)


# Singleton instance
_record_fetcher = None

def get_record_fetcher() -> RecordFetcher:
    """Get singleton instance of RecordFetcher"""
    global _record_fetcher
    if _record_fetcher is None:
        _record_fetcher = RecordFetcher()
    return _record_fetcher
