"""
Directory Query Service

Reads the business directory for the signed-in principal: resolves the
session, fetches raw rows through the record fetcher, maps them into
view-models and caches the result per (entity, principal).
"""

import asyncio
import logging
from functools import partial
from typing import List, Dict, Any, Optional, Sequence

from bizhub.errors import BackendError, NotAuthenticated
from bizhub.models.domain import Classification, Job, Principal
from bizhub.models.query import QueryResult
from bizhub.services.mappers import (
    map_associates,
    map_customers,
    map_job,
    map_organization,
    map_person,
)
from bizhub.services.query_cache import QueryCache
from bizhub.services.record_fetcher import (
    ASSOCIATE_EMBED,
    JOB_EMBEDS,
    OWNER_COLUMN,
    PERSON_ORGANIZATION_EMBED,
    EmbedSpec,
    RecordFetcher,
    get_record_fetcher,
)
from bizhub.services.session import SessionAccessor, SettingsSessionAccessor

logger = logging.getLogger(__name__)

ENTITIES = ("organizations", "associates", "customers", "people", "jobs", "job")


class DirectoryQueryService:
    """Cached, principal-scoped reads of the business directory"""

    def __init__(
        self,
        session: Optional[SessionAccessor] = None,
        fetcher: Optional[RecordFetcher] = None,
        cache: Optional[QueryCache] = None
    ):
        self.session = session or SettingsSessionAccessor()
        self.fetcher = fetcher or get_record_fetcher()
        self.cache = cache or QueryCache()
        self._loaders = {
            "organizations": self._load_organizations,
            "associates": self._load_associates,
            "customers": self._load_customers,
            "people": self._load_people,
            "jobs": self._load_jobs,
            "job": self._load_job,
        }

    async def get_organizations(self) -> QueryResult:
        """All organizations owned by the principal"""
        return await self._query("organizations")

    async def get_associates(self) -> QueryResult:
        """Organizations classified as associate, joined with their associate record"""
        return await self._query("associates")

    async def get_customers(self) -> QueryResult:
        """Organizations classified as customer"""
        return await self._query("customers")

    async def get_people(self) -> QueryResult:
        """People with the name of the organization they belong to"""
        return await self._query("people")

    async def get_jobs(self) -> QueryResult:
        """Jobs with customer, assigned person and organization names"""
        return await self._query("jobs")

    async def get_job(self, job_id: str) -> QueryResult:
        """
        A single job by id, with the same joins as get_jobs.

        Cached under its own key, so it is independent of the jobs list.
        A job the principal does not own reads as missing.
        """
        return await self._query("job", job_id)

    async def refetch(self, entity: str, *args: Any) -> QueryResult:
        """Load an entity again, ignoring the cached result"""
        return await self._query(entity, *args, force=True)

    def invalidate(self, entity: Optional[str] = None) -> None:
        """
        Mark cached results stale for every principal.

        Call this after a successful create through the mutation client;
        the client does not touch the cache itself.

        Single-job reads are the entity "job"; invalidating it clears every
        cached job id.

        Args:
            entity: Entity name to invalidate, or None for everything
        """
        if entity is None:
            self.cache.invalidate_all()
            return
        self._check_entity(entity)
        for key in self.cache.keys():
            if key[0] == entity:
                self.cache.invalidate(key)

    async def _query(self, entity: str, *args: Any, force: bool = False) -> QueryResult:
        self._check_entity(entity)
        try:
            principal = self.session.get_current_principal()
        except NotAuthenticated as e:
            return QueryResult.failure(e)

        key = (entity, principal.id, *args)
        loader = partial(self._loaders[entity], principal, *args)
        if force:
            return await self.cache.refetch(key, loader)
        return await self.cache.fetch(key, loader)

    def _check_entity(self, entity: str) -> None:
        if entity not in self._loaders:
            raise ValueError(f"Unknown entity {entity!r}; expected one of {', '.join(ENTITIES)}")

    async def _read(
        self,
        collection: str,
        principal: Principal,
        embed: Sequence[EmbedSpec] = (),
        **filters: Any
    ) -> List[Dict[str, Any]]:
        """Owner-scoped read, run off the event loop"""
        scoped = {OWNER_COLUMN: principal.id, **filters}
        return await asyncio.to_thread(self.fetcher.fetch, collection, scoped, embed)

    async def _load_organizations(self, principal: Principal) -> List[Any]:
        rows = await self._read("organizations", principal)
        return [map_organization(row) for row in rows]

    async def _load_associates(self, principal: Principal) -> List[Any]:
        rows = await self._read(
            "organizations",
            principal,
            embed=(ASSOCIATE_EMBED,),
            classification=Classification.ASSOCIATE.value,
        )
        return map_associates(rows)

    async def _load_customers(self, principal: Principal) -> List[Any]:
        rows = await self._read(
            "organizations", principal, classification=Classification.CUSTOMER.value
        )
        return map_customers(rows)

    async def _load_people(self, principal: Principal) -> List[Any]:
        rows = await self._read("people", principal, embed=(PERSON_ORGANIZATION_EMBED,))
        return [map_person(row) for row in rows]

    async def _load_jobs(self, principal: Principal) -> List[Any]:
        rows = await self._read("jobs", principal, embed=JOB_EMBEDS)
        logger.debug(f"Mapping {len(rows)} jobs for principal {principal.id}")
        return [map_job(row) for row in rows]

    async def _load_job(self, principal: Principal, job_id: str) -> Job:
        rows = await self._read("jobs", principal, embed=JOB_EMBEDS, id=job_id)
        if not rows:
            raise BackendError(f"Job {job_id} not found", status_code=404)
        return map_job(rows[0])


# Singleton instance
_directory_query_service = None

def get_directory_query_service() -> DirectoryQueryService:
    """Get singleton instance of DirectoryQueryService"""
    global _directory_query_service
    if _directory_query_service is None:
        _directory_query_service = DirectoryQueryService()
    return _directory_query_service
