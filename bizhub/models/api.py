"""
API Models - Pydantic models for the write API requests and responses.

Field names are snake_case in Python and camelCase on the wire; dump with
``by_alias=True`` to get the body the REST API expects.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel

from .domain import JobStatus, JobPriority


class OrganizationRelation(str, Enum):
    """Relation values accepted when creating an organization."""
    UNKNOWN = "Unknown"
    VENDOR = "Vendor"
    PARTNER = "Partner"
    OTHER = "Other"


class CamelModel(BaseModel):
    """Base for wire models: camelCase aliases, populated by either name."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Organization API Models
# ============================================================================

class CreateOrganizationRequest(CamelModel):
    """Request payload for POST /api/organizations."""

    name: str = Field(..., description="Organization name")
    relation: OrganizationRelation = Field(default=OrganizationRelation.UNKNOWN)
    category: str = ""
    email: str = ""
    cell_number: str = ""
    office_number: str = ""
    phone_with_extension: str = ""
    website: str = ""
    linkedin: str = ""
    facebook: str = ""
    twitter: str = ""
    additional_info: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zipcode: str = ""


class OrganizationResponse(CamelModel):
    """Persisted organization returned by the API."""

    id: str
    name: str
    relation: Optional[str] = None
    category: Optional[str] = None
    email: Optional[str] = None
    cell_number: Optional[str] = None
    office_number: Optional[str] = None
    phone_with_extension: Optional[str] = None
    website: Optional[str] = None
    linkedin: Optional[str] = None
    facebook: Optional[str] = None
    twitter: Optional[str] = None
    additional_info: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============================================================================
# Job API Models
# ============================================================================

class ContactInfo(CamelModel):
    """On-site contact for a job."""

    name: str = ""
    phone: str = ""
    email: str = ""


class CreateJobRequest(CamelModel):
    """Request payload for POST /api/jobs."""

    name: str = Field(..., description="Job name")
    description: str = ""
    client_id: str = ""
    organization_id: str = ""
    location: str = ""
    phase: str = ""
    status: JobStatus = JobStatus.NEW
    priority: JobPriority = JobPriority.MEDIUM
    start_date: str = ""
    end_date: str = ""
    assigned_person_id: str = ""
    assigned_techs: List[str] = Field(default_factory=list)
    contact_info: ContactInfo = Field(default_factory=ContactInfo)
    tags: List[str] = Field(default_factory=list)
    is_favorite: bool = False


class JobResponse(CamelModel):
    """Persisted job returned by the API."""

    id: str
    name: str
    description: Optional[str] = None
    client_id: Optional[str] = None
    organization_id: Optional[str] = None
    location: Optional[str] = None
    phase: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    assigned_person_id: Optional[str] = None
    assigned_techs: List[str] = Field(default_factory=list)
    contact_info: Optional[ContactInfo] = None
    tags: List[str] = Field(default_factory=list)
    is_favorite: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============================================================================
# Person API Models
# ============================================================================

class CreatePersonRequest(CamelModel):
    """Request payload for POST /api/people."""

    organization_id: Optional[str] = None
    first_name: str
    last_name: str
    title: str = ""
    birthday: str = ""
    email: str = ""
    office_number: str = ""
    cell_number: str = ""
    phone_with_extension: str = ""
    linkedin: str = ""
    facebook: str = ""
    twitter: str = ""
    additional_info: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zipcode: str = ""


class PersonResponse(CamelModel):
    """Persisted person returned by the API."""

    id: str
    organization_id: Optional[str] = None
    first_name: str
    last_name: str
    title: Optional[str] = None
    birthday: Optional[str] = None
    email: Optional[str] = None
    office_number: Optional[str] = None
    cell_number: Optional[str] = None
    phone_with_extension: Optional[str] = None
    linkedin: Optional[str] = None
    facebook: Optional[str] = None
    twitter: Optional[str] = None
    additional_info: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
