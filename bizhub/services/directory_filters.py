"""
Directory lookups and list filters used by the directory pages.

All helpers are pure: they take view-models and return display-safe values,
never raising for unknown ids.
"""

from typing import Iterable, List, Optional

from bizhub.models.domain import Associate, Customer, Organization, Person

ALL = "all"
NO_ORGANIZATION = "No Organization"
UNKNOWN_ORGANIZATION = "Unknown Organization"


class OrganizationLookup:
    """Resolves organization ids to display values"""

    def __init__(self, organizations: Iterable[Organization]):
        self._by_id = {organization.id: organization for organization in organizations}

    def get_organization_name(self, organization_id: Optional[str]) -> str:
        if not organization_id:
            return NO_ORGANIZATION
        organization = self._by_id.get(organization_id)
        if organization is None or not organization.name:
            return UNKNOWN_ORGANIZATION
        return organization.name

    def get_organization_classification(self, organization_id: Optional[str]) -> Optional[str]:
        if not organization_id:
            return None
        organization = self._by_id.get(organization_id)
        if organization is None or organization.classification is None:
            return None
        return organization.classification.value


def _contains(value: Optional[str], term: str) -> bool:
    return bool(value) and term in value.lower()


def filter_associates(
    associates: Iterable[Associate],
    search_term: str = "",
    availability: str = ALL
) -> List[Associate]:
    """Match name, any skill or any certification; then availability"""
    term = search_term.lower()
    return [
        associate for associate in associates
        if (
            _contains(associate.name, term)
            or any(_contains(skill, term) for skill in associate.skills)
            or any(_contains(cert, term) for cert in associate.certifications)
        )
        and (availability == ALL or associate.availability.value == availability)
    ]


def filter_customers(customers: Iterable[Customer], search_term: str = "") -> List[Customer]:
    """Match name, email or company"""
    term = search_term.lower()
    return [
        customer for customer in customers
        if _contains(customer.name, term)
        or _contains(customer.email, term)
        or _contains(customer.company, term)
    ]


def filter_organizations(
    organizations: Iterable[Organization],
    search_term: str = "",
    relation: str = ALL
) -> List[Organization]:
    """Match name, category or email; then relation"""
    term = search_term.lower()
    return [
        organization for organization in organizations
        if (
            _contains(organization.name, term)
            or _contains(organization.category, term)
            or _contains(organization.email, term)
        )
        and (relation == ALL or organization.relation == relation)
    ]


def filter_people(
    people: Iterable[Person],
    search_term: str = "",
    organization_id: str = ALL
) -> List[Person]:
    """Match full name, email or title; then organization"""
    term = search_term.lower()
    return [
        person for person in people
        if (
            _contains(person.full_name, term)
            or _contains(person.email, term)
            or _contains(person.title, term)
        )
        and (organization_id == ALL or person.organization_id == organization_id)
    ]
