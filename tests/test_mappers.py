"""
View-model mapping tests

Covers defaulting, join resolution and the classification partition for
every entity mapper.
"""

import sys
import os
from datetime import datetime

# Add the project root to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from bizhub.models import Availability, Classification, CustomerStatus, JobPriority, JobStatus
from bizhub.services.mappers import (
    first_embedded,
    join_address,
    map_associate,
    map_associates,
    map_customer,
    map_customers,
    map_job,
    map_organization,
    map_person,
    organization_to_row,
)


def org_row(**overrides):
    row = {
        'id': 'o1',
        'name': 'Acme',
        'email': 'ops@acme.test',
        'phone': '555-0100',
        'address': '1 Main St',
        'city': 'Springfield',
        'state': 'IL',
        'zipcode': '62701',
        'additional_info': 'Prefers mornings',
        'classification': 'associate',
        'user_id': 'p1',
        'created_at': datetime(2024, 1, 10, 9, 0),
    }
    row.update(overrides)
    return row


class TestAssociateMapping:
    """Organization + embedded associate rows -> Associate"""

    def test_scenario_single_embedded_associate(self):
        """Embedded associate supplies id and rating; the rest defaults"""
        row = {'id': 'o1', 'classification': 'associate', 'name': 'Acme',
               'associates': [{'id': 'a1', 'rating': 4.5}]}

        associate = map_associate(row)

        assert associate.id == 'a1'
        assert associate.name == 'Acme'
        assert associate.rating == 4.5
        assert associate.hourly_rate == 0
        assert associate.availability == Availability.AVAILABLE
        assert associate.skills == []
        assert associate.certifications == []

    def test_missing_numbers_default_to_zero(self):
        """hourly_rate, rating and completed_jobs are 0 when absent or null"""
        for embedded in ([], [{}], [{'hourly_rate': None, 'rating': None, 'completed_jobs': None}]):
            associate = map_associate(org_row(associates=embedded))
            assert associate.hourly_rate == 0
            assert associate.rating == 0
            assert associate.completed_jobs == 0

    def test_negative_numbers_clamped(self):
        associate = map_associate(org_row(associates=[{'id': 'a1', 'hourly_rate': -5, 'completed_jobs': -1}]))
        assert associate.hourly_rate == 0
        assert associate.completed_jobs == 0

    def test_id_falls_back_to_organization(self):
        """Without an associate sub-record the organization id is used"""
        associate = map_associate(org_row(associates=[]))
        assert associate.id == 'o1'
        assert associate.organization_id == 'o1'
        assert associate.organization_name == 'Acme'

    def test_first_of_many_embedded_records_wins(self):
        """Multiple sub-records: first is used, every time"""
        row = org_row(associates=[
            {'id': 'a1', 'availability': 'busy', 'skills': ['HVAC']},
            {'id': 'a2', 'availability': 'offline', 'skills': ['Plumbing']},
        ])

        results = [map_associate(row) for _ in range(3)]

        assert all(result == results[0] for result in results)
        assert results[0].id == 'a1'
        assert results[0].availability == Availability.BUSY
        assert results[0].skills == ['HVAC']

    def test_embedded_dict_accepted(self):
        """A to-one embed may arrive as a dict rather than a list"""
        associate = map_associate(org_row(associates={'id': 'a9', 'certifications': ['EPA 608']}))
        assert associate.id == 'a9'
        assert associate.certifications == ['EPA 608']

    def test_contact_and_address_from_organization(self):
        associate = map_associate(org_row(associates=[{'id': 'a1'}], city=None))
        assert associate.email == 'ops@acme.test'
        assert associate.location_address == '1 Main St, IL, 62701'

    def test_unknown_availability_defaults(self):
        associate = map_associate(org_row(associates=[{'availability': 'on-leave'}]))
        assert associate.availability == Availability.AVAILABLE


class TestClassificationPartition:
    """Only classified organizations reach the associate and customer lists"""

    def test_unclassified_rows_in_neither_list(self):
        rows = [
            org_row(id='o1', classification='associate'),
            org_row(id='o2', classification='customer'),
            org_row(id='o3', classification=None),
            org_row(id='o4'),
            org_row(id='o5', classification='vendor'),
        ]
        rows[3].pop('classification')

        associates = map_associates(rows)
        customers = map_customers(rows)

        assert [a.organization_id for a in associates] == ['o1']
        assert [c.id for c in customers] == ['o2']

    def test_unknown_classification_normalized(self):
        organization = map_organization(org_row(classification='partner'))
        assert organization.classification is None


class TestCustomerMapping:
    """Organization rows -> Customer"""

    def test_fixed_placeholders(self):
        customer = map_customer(org_row(classification='customer'))

        assert customer.status == CustomerStatus.ACTIVE
        assert customer.total_jobs == 0
        assert customer.last_contact is None
        assert customer.company == 'Acme'
        assert customer.notes == 'Prefers mornings'
        assert customer.address == '1 Main St, Springfield, IL, 62701'

    def test_missing_contact_fields_are_empty_strings(self):
        customer = map_customer(org_row(email=None, phone=None, address=None,
                                        city=None, state=None, zipcode=None))
        assert customer.email == ''
        assert customer.phone == ''
        assert customer.address == ''

    def test_ui_aliases(self):
        dumped = map_customer(org_row()).model_dump(by_alias=True)
        assert dumped['totalJobs'] == 0
        assert 'lastContact' in dumped


class TestOrganizationMapping:
    """Organization rows -> Organization and back"""

    def test_round_trip_identity_and_core_fields(self):
        row = org_row(relation='Vendor', category='HVAC', website='https://acme.test')

        restored = organization_to_row(map_organization(row))

        for column in ('id', 'name', 'user_id', 'classification', 'email', 'relation',
                       'category', 'website', 'additional_info', 'created_at'):
            assert restored[column] == row[column]

    def test_additional_info_alias(self):
        dumped = map_organization(org_row()).model_dump(by_alias=True)
        assert dumped['additionalInfo'] == 'Prefers mornings'
        assert dumped['classification'] == Classification.ASSOCIATE


class TestPersonMapping:
    """People rows -> Person"""

    def test_embedded_organization_name(self):
        person = map_person({'id': 'pe1', 'first_name': 'Dana', 'last_name': 'Reyes',
                             'organization_id': 'o1', 'organizations': {'name': 'Acme'}})
        assert person.organization_name == 'Acme'
        assert person.full_name == 'Dana Reyes'
        assert person.is_technician is False

    def test_missing_organization(self):
        person = map_person({'id': 'pe1', 'first_name': 'Dana', 'last_name': 'Reyes',
                             'organization_id': None, 'organizations': None,
                             'is_technician': True})
        assert person.organization_name == ''
        assert person.is_technician is True


class TestJobMapping:
    """Jobs rows with joins -> Job"""

    def base_row(self, **overrides):
        row = {
            'id': 'j1',
            'name': 'HVAC install',
            'status': 'In Progress',
            'priority': 'High',
            'user_id': 'p1',
            'customers': {'name': 'ABC Corp'},
            'people': {'first_name': 'John', 'last_name': 'Smith'},
            'organizations': {'name': 'Acme'},
        }
        row.update(overrides)
        return row

    def test_display_names_from_joins(self):
        job = map_job(self.base_row())

        assert job.customer_name == 'ABC Corp'
        assert job.assigned_person_name == 'John Smith'
        assert job.organization_name == 'Acme'
        assert job.status == JobStatus.IN_PROGRESS

    def test_null_joins_give_empty_strings(self):
        job = map_job(self.base_row(customers=None, people=None, organizations=None))

        assert job.customer_name == ''
        assert job.assigned_person_name == ''
        assert job.organization_name == ''
        dumped = job.model_dump(by_alias=True)
        assert dumped['customerName'] == ''
        assert dumped['assignedPersonName'] == ''
        assert dumped['organizationName'] == ''

    def test_sequences_always_present(self):
        job = map_job(self.base_row(assigned_techs=None, tags=None, notes=None, is_favorite=None))

        assert job.assigned_techs == []
        assert job.tags == []
        assert job.notes == []
        assert job.tasks == []
        assert job.timeline == []
        assert job.is_favorite is False

    def test_unknown_status_and_priority_get_defaults(self):
        job = map_job(self.base_row(status='Pending', priority='normal'))

        assert job.status == JobStatus.NEW
        assert job.priority == JobPriority.MEDIUM

    def test_missing_status_and_priority_get_defaults(self):
        job = map_job(self.base_row(status=None, priority=None))

        assert job.status == JobStatus.NEW
        assert job.priority == JobPriority.MEDIUM

    def test_job_number_kept(self):
        job = map_job(self.base_row(job_number='25649-0101'))

        assert job.job_number == '25649-0101'


class TestHelpers:
    """Address joining and embed resolution"""

    def test_join_address_skips_blanks(self):
        assert join_address({'address': '', 'city': 'Austin', 'state': None, 'zipcode': '73301'}) == 'Austin, 73301'
        assert join_address({}) == ''

    def test_first_embedded(self):
        assert first_embedded([]) is None
        assert first_embedded(None) is None
        assert first_embedded({}) is None
        assert first_embedded([{'id': 1}, {'id': 2}]) == {'id': 1}
