"""
Domain Models - Pydantic view-models for the business directory.

These models are the normalized, UI-consumable shapes built from raw
backend rows (organizations, associates, customers, people, jobs). Each
model owns its defaulting rules in its validators, so a view-model is
always complete no matter which optional columns the row left empty.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, Field, ConfigDict, field_validator

logger = logging.getLogger(__name__)


# ============================================================================
# Enums
# ============================================================================

class Classification(str, Enum):
    """Directory an organization is listed in."""
    ASSOCIATE = "associate"
    CUSTOMER = "customer"


class Availability(str, Enum):
    """Availability values for associates."""
    AVAILABLE = "available"
    BUSY = "busy"
    OFFLINE = "offline"


class CustomerStatus(str, Enum):
    """Status values for customers."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class JobStatus(str, Enum):
    """Status values for jobs."""
    NEW = "New"
    SCHEDULED = "Scheduled"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class JobPriority(str, Enum):
    """Priority values for jobs."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"


# ============================================================================
# Session
# ============================================================================

class Principal(BaseModel):
    """The authenticated user every query is scoped to."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: Optional[str] = None
    access_token: Optional[str] = Field(default=None, repr=False)


# ============================================================================
# View-Models
# ============================================================================

def _empty_list(value: Any) -> Any:
    return [] if value is None else value


def _empty_string(value: Any) -> Any:
    return "" if value is None else value


def _non_negative(value: Any, field_name: str) -> Any:
    if value is None:
        return 0
    if value < 0:
        logger.warning(f"Negative {field_name}={value} clamped to 0")
        return 0
    return value


class Organization(BaseModel):
    """Organization from the organizations table."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    relation: Optional[str] = None
    category: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    linkedin: Optional[str] = None
    facebook: Optional[str] = None
    twitter: Optional[str] = None
    additional_info: Optional[str] = Field(default=None, alias="additionalInfo")
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None
    classification: Optional[Classification] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    user_id: Optional[str] = None

    @field_validator("classification", mode="before")
    @classmethod
    def _known_classification(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        if isinstance(value, Classification):
            return value
        if value not in {c.value for c in Classification}:
            logger.warning(f"Unknown organization classification {value!r} treated as unclassified")
            return None
        return value


class Associate(BaseModel):
    """Associate built from an organization and its associate sub-record."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    location_address: str = ""
    availability: Availability = Availability.AVAILABLE
    hourly_rate: float = 0
    rating: float = 0
    completed_jobs: int = 0
    skills: List[str] = Field(default_factory=list)
    certifications: List[str] = Field(default_factory=list)
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None
    joined_at: Optional[datetime] = None
    organization_name: str = ""
    organization_id: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("availability", mode="before")
    @classmethod
    def _default_availability(cls, value: Any) -> Any:
        if value is None or value == "":
            return Availability.AVAILABLE
        if isinstance(value, str) and value not in {a.value for a in Availability}:
            logger.warning(f"Unknown availability {value!r} treated as available")
            return Availability.AVAILABLE
        return value

    @field_validator("hourly_rate", "rating", "completed_jobs", mode="before")
    @classmethod
    def _default_number(cls, value: Any, info) -> Any:
        return _non_negative(value, info.field_name)

    @field_validator("skills", "certifications", mode="before")
    @classmethod
    def _default_sequence(cls, value: Any) -> Any:
        return _empty_list(value)

    @field_validator("location_address", "organization_name", mode="before")
    @classmethod
    def _default_text(cls, value: Any) -> Any:
        return _empty_string(value)


class Customer(BaseModel):
    """Customer projected from an organization classified as customer."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    email: str = ""
    phone: str = ""
    address: str = ""
    company: Optional[str] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    last_contact: Optional[datetime] = Field(default=None, alias="lastContact")
    # TODO: count jobs per customer once the jobs read embeds customer ids
    total_jobs: int = Field(default=0, alias="totalJobs")
    status: CustomerStatus = CustomerStatus.ACTIVE
    notes: Optional[str] = None

    @field_validator("email", "phone", "address", mode="before")
    @classmethod
    def _default_text(cls, value: Any) -> Any:
        return _empty_string(value)


class Person(BaseModel):
    """Person from the people table, with the embedded organization name."""

    model_config = ConfigDict(frozen=True)

    id: str
    first_name: str
    last_name: str
    title: Optional[str] = None
    email: Optional[str] = None
    birthday: Optional[str] = None
    office_number: Optional[str] = None
    cell_number: Optional[str] = None
    phone_alt: Optional[str] = None
    is_technician: bool = False
    organization_id: Optional[str] = None
    organization_name: str = ""
    additional_info: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipcode: Optional[str] = None
    created_at: Optional[datetime] = None
    user_id: Optional[str] = None

    @field_validator("is_technician", mode="before")
    @classmethod
    def _default_flag(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("organization_name", mode="before")
    @classmethod
    def _default_text(cls, value: Any) -> Any:
        return _empty_string(value)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Job(BaseModel):
    """Job from the jobs table with display names from its joins."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    job_number: Optional[str] = None
    description: Optional[str] = None
    phase: Optional[str] = None
    status: JobStatus = JobStatus.NEW
    priority: JobPriority = JobPriority.MEDIUM
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    scheduled_date: Optional[datetime] = None
    estimated_duration: Optional[float] = None
    location: Optional[str] = None
    customer_id: Optional[str] = None
    organization_id: Optional[str] = None
    assigned_person_id: Optional[str] = None
    assigned_techs: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)
    is_favorite: bool = False
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    customer_name: str = Field(default="", alias="customerName")
    assigned_person_name: str = Field(default="", alias="assignedPersonName")
    organization_name: str = Field(default="", alias="organizationName")
    tasks: List[Dict[str, Any]] = Field(default_factory=list)
    timeline: List[Dict[str, Any]] = Field(default_factory=list)
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("status", mode="before")
    @classmethod
    def _known_status(cls, value: Any) -> Any:
        if value is None or value == "":
            return JobStatus.NEW
        if isinstance(value, str) and value not in {s.value for s in JobStatus}:
            logger.warning(f"Unknown job status {value!r} treated as New")
            return JobStatus.NEW
        return value

    @field_validator("priority", mode="before")
    @classmethod
    def _known_priority(cls, value: Any) -> Any:
        if value is None or value == "":
            return JobPriority.MEDIUM
        if isinstance(value, str) and value not in {p.value for p in JobPriority}:
            logger.warning(f"Unknown job priority {value!r} treated as Medium")
            return JobPriority.MEDIUM
        return value

    @field_validator("assigned_techs", "tags", "notes", "tasks", "timeline", mode="before")
    @classmethod
    def _default_sequence(cls, value: Any) -> Any:
        return _empty_list(value)

    @field_validator("customer_name", "assigned_person_name", "organization_name", mode="before")
    @classmethod
    def _default_text(cls, value: Any) -> Any:
        return _empty_string(value)

    @field_validator("is_favorite", mode="before")
    @classmethod
    def _default_flag(cls, value: Any) -> Any:
        return False if value is None else value
