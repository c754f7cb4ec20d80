"""
View-Model Mappers

Pure functions from raw backend rows (plus their embedded joins) to the
view-models in bizhub.models.domain. Renaming and join resolution happen
here, once; defaulting lives in the models themselves.
"""

import logging
from typing import List, Dict, Any, Optional, Iterable

from bizhub.models.domain import (
    Associate,
    Classification,
    Customer,
    Job,
    Organization,
    Person,
)

logger = logging.getLogger(__name__)

RawRow = Dict[str, Any]

ORGANIZATION_COLUMNS = (
    "id",
    "name",
    "relation",
    "category",
    "email",
    "phone",
    "website",
    "linkedin",
    "facebook",
    "twitter",
    "additional_info",
    "address",
    "city",
    "state",
    "zipcode",
    "classification",
    "created_at",
    "user_id",
)


def join_address(row: RawRow) -> str:
    """Street, city, state and zipcode joined with ', ', skipping blanks"""
    parts = (row.get("address"), row.get("city"), row.get("state"), row.get("zipcode"))
    return ", ".join(part for part in parts if part)


def first_embedded(value: Any) -> Optional[RawRow]:
    """
    Resolve an embed modeled as at-most-one.

    A list embed yields its first element; extra elements are a data anomaly
    and are ignored. A dict is returned as-is, anything empty as None.
    """
    if isinstance(value, list):
        if len(value) > 1:
            logger.warning(f"Expected at most one embedded record, got {len(value)}; using the first")
        return value[0] if value else None
    return value or None


def map_organization(row: RawRow) -> Organization:
    """Raw organizations row -> Organization"""
    return Organization(**{column: row.get(column) for column in ORGANIZATION_COLUMNS})


def organization_to_row(organization: Organization) -> RawRow:
    """Organization -> raw column names (the inverse of map_organization)"""
    row = organization.model_dump(by_alias=False, include=set(ORGANIZATION_COLUMNS))
    if organization.classification is not None:
        row["classification"] = organization.classification.value
    return row


def map_associate(row: RawRow) -> Associate:
    """
    Raw organizations row with an embedded ``associates`` collection -> Associate.

    Contact and address details come from the organization; operational
    details come from the associate sub-record when there is one.
    """
    associate = first_embedded(row.get("associates")) or {}
    return Associate(
        id=associate.get("id") or row["id"],
        name=row["name"],
        email=row.get("email"),
        phone=row.get("phone"),
        location_address=join_address(row),
        availability=associate.get("availability"),
        hourly_rate=associate.get("hourly_rate"),
        rating=associate.get("rating"),
        completed_jobs=associate.get("completed_jobs"),
        skills=associate.get("skills"),
        certifications=associate.get("certifications"),
        location_lat=associate.get("location_lat"),
        location_lng=associate.get("location_lng"),
        joined_at=associate.get("joined_at"),
        organization_name=row["name"],
        organization_id=row["id"],
        user_id=row.get("user_id"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def map_customer(row: RawRow) -> Customer:
    """Raw organizations row -> Customer"""
    return Customer(
        id=row["id"],
        name=row["name"],
        email=row.get("email"),
        phone=row.get("phone"),
        address=join_address(row),
        company=row["name"],
        created_at=row.get("created_at"),
        notes=row.get("additional_info"),
    )


def _is_classified(row: RawRow, classification: Classification) -> bool:
    return map_organization(row).classification == classification


def map_associates(rows: Iterable[RawRow]) -> List[Associate]:
    """Associates for the rows classified as associate; others are skipped"""
    return [map_associate(row) for row in rows if _is_classified(row, Classification.ASSOCIATE)]


def map_customers(rows: Iterable[RawRow]) -> List[Customer]:
    """Customers for the rows classified as customer; others are skipped"""
    return [map_customer(row) for row in rows if _is_classified(row, Classification.CUSTOMER)]


def map_person(row: RawRow) -> Person:
    """Raw people row with an embedded ``organizations`` record -> Person"""
    organization = first_embedded(row.get("organizations")) or {}
    return Person(
        id=row["id"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        title=row.get("title"),
        email=row.get("email"),
        birthday=row.get("birthday"),
        office_number=row.get("office_number"),
        cell_number=row.get("cell_number"),
        phone_alt=row.get("phone_alt"),
        is_technician=row.get("is_technician"),
        organization_id=row.get("organization_id"),
        organization_name=organization.get("name"),
        additional_info=row.get("additional_info"),
        address=row.get("address"),
        city=row.get("city"),
        state=row.get("state"),
        zipcode=row.get("zipcode"),
        created_at=row.get("created_at"),
        user_id=row.get("user_id"),
    )


def _person_name(person: Optional[RawRow]) -> str:
    if not person:
        return ""
    return f"{person.get('first_name') or ''} {person.get('last_name') or ''}".strip()


def map_job(row: RawRow) -> Job:
    """
    Raw jobs row with ``customers``, ``people`` and ``organizations`` embeds -> Job.

    Tasks and timeline have no backing join yet and are always empty.
    """
    customer = first_embedded(row.get("customers")) or {}
    person = first_embedded(row.get("people"))
    organization = first_embedded(row.get("organizations")) or {}

    embedded = {"customers", "people", "organizations"}
    fields = {key: value for key, value in row.items() if key not in embedded and key in Job.model_fields}
    fields.update(
        customer_name=customer.get("name"),
        assigned_person_name=_person_name(person),
        organization_name=organization.get("name"),
        tasks=[],
        timeline=[],
    )
    return Job(**fields)
