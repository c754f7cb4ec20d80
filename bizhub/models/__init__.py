"""
Models package for BizHub.
"""

# Domain models
from .domain import (
    Principal,
    Organization,
    Associate,
    Customer,
    Person,
    Job,
    Classification,
    Availability,
    CustomerStatus,
    JobStatus,
    JobPriority,
)

# Query models
from .query import (
    QueryResult,
    QueryStatus,
)

# API models
from .api import (
    OrganizationRelation,
    ContactInfo,
    CreateOrganizationRequest,
    OrganizationResponse,
    CreateJobRequest,
    JobResponse,
    CreatePersonRequest,
    PersonResponse,
)

__version__ = "0.1.0"

__all__ = [
    # Domain
    "Principal",
    "Organization",
    "Associate",
    "Customer",
    "Person",
    "Job",
    "Classification",
    "Availability",
    "CustomerStatus",
    "JobStatus",
    "JobPriority",
    # Query
    "QueryResult",
    "QueryStatus",
    # API
    "OrganizationRelation",
    "ContactInfo",
    "CreateOrganizationRequest",
    "OrganizationResponse",
    "CreateJobRequest",
    "JobResponse",
    "CreatePersonRequest",
    "PersonResponse",
]
