"""
Mutation Client

Sends create requests for jobs, organizations and people to the REST API.

The payload goes out exactly as the request model dumps it; nothing is
validated or normalized client-side beyond the model's type shape. On a
non-success response the server's ``message`` is surfaced when the body
parses, otherwise a generic failure message.

The client never touches the query cache. After a successful create the
caller must invalidate the affected entity (for example
``DirectoryQueryService.invalidate("jobs")``) or the directory stays stale.
"""

import logging
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel

from bizhub.errors import BackendError, ValidationError
from bizhub.models.api import (
    CreateJobRequest,
    CreateOrganizationRequest,
    CreatePersonRequest,
    JobResponse,
    OrganizationResponse,
    PersonResponse,
)
from bizhub.models.domain import Principal
from bizhub.utils.config import settings

logger = logging.getLogger(__name__)

ResponseModel = TypeVar("ResponseModel", bound=BaseModel)

ENDPOINTS = {
    "job": "/api/jobs",
    "organization": "/api/organizations",
    "person": "/api/people",
}

# Statuses that mean the server rejected the payload itself
VALIDATION_STATUSES = {400, 409, 422}


class MutationClient:
    """Async client for the create endpoints"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        principal: Optional[Principal] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: API root (defaults to settings.API_BASE_URL)
            timeout: Request timeout in seconds (defaults to settings.HTTP_TIMEOUT_SECONDS)
            principal: Signed-in principal; its access token is sent as a bearer token
            transport: Custom httpx transport, mainly for tests
        """
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = settings.HTTP_TIMEOUT_SECONDS if timeout is None else timeout
        self.principal = principal
        self.transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {"Content-Type": "application/json"}
            if self.principal is not None and self.principal.access_token:
                headers["Authorization"] = f"Bearer {self.principal.access_token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=httpx.Timeout(self.timeout),
                transport=self.transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "MutationClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def create_job(self, request: CreateJobRequest) -> JobResponse:
        return await self._create("job", request, JobResponse)

    async def create_organization(self, request: CreateOrganizationRequest) -> OrganizationResponse:
        return await self._create("organization", request, OrganizationResponse)

    async def create_person(self, request: CreatePersonRequest) -> PersonResponse:
        return await self._create("person", request, PersonResponse)

    async def _create(
        self,
        entity: str,
        request: BaseModel,
        response_model: Type[ResponseModel]
    ) -> ResponseModel:
        """
        POST a create request and parse the persisted record.

        Raises:
            ValidationError: If the server rejected the payload (400, 409, 422)
            BackendError: For any other failure, including transport errors
        """
        payload = request.model_dump(by_alias=True, mode="json")
        client = await self._get_client()
        try:
            response = await client.post(ENDPOINTS[entity], json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Failed to create {entity}: {e}")
            raise BackendError(f"Failed to create {entity}") from e

        if not response.is_success:
            message = self._error_message(response, f"Failed to create {entity}")
            logger.error(f"Create {entity} rejected with {response.status_code}: {message}")
            if response.status_code in VALIDATION_STATUSES:
                raise ValidationError(message, status_code=response.status_code)
            raise BackendError(message, status_code=response.status_code)

        try:
            record = response_model.model_validate(response.json())
        except ValueError as e:
            logger.error(f"Unreadable create {entity} response: {e}")
            raise BackendError(f"Failed to create {entity}", status_code=response.status_code) from e
        logger.info(f"Created {entity} {getattr(record, 'id', '')}")
        return record

    @staticmethod
    def _error_message(response: httpx.Response, fallback: str) -> str:
        """The body's ``message`` field, or fallback if it does not parse"""
        try:
            body: Dict[str, Any] = response.json()
        except ValueError:
            return fallback
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return fallback
