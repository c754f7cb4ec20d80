"""
Services package for BizHub.
"""

from .session import (
    SessionAccessor,
    StaticSessionAccessor,
    SettingsSessionAccessor,
)
from .record_fetcher import (
    EmbedSpec,
    RecordFetcher,
    get_record_fetcher,
)
from .query_cache import QueryCache
from .directory_queries import (
    DirectoryQueryService,
    get_directory_query_service,
)
from .directory_filters import (
    OrganizationLookup,
    filter_associates,
    filter_customers,
    filter_organizations,
    filter_people,
)
from .mutation_client import MutationClient

__version__ = "0.1.0"

__all__ = [
    "SessionAccessor",
    "StaticSessionAccessor",
    "SettingsSessionAccessor",
    "EmbedSpec",
    "RecordFetcher",
    "get_record_fetcher",
    "QueryCache",
    "DirectoryQueryService",
    "get_directory_query_service",
    "OrganizationLookup",
    "filter_associates",
    "filter_customers",
    "filter_organizations",
    "filter_people",
    "MutationClient",
]
