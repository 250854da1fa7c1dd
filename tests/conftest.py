from dataclasses import dataclass, field
from datetime import time

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from employees.models import Employee
from employees.services import register_employee
from tenants.models import Site, Tenant


@dataclass
class SentMessage:
    to: str
    body: str
    buttons: list = field(default_factory=list)


class FakeSender:
    """Records outbound WhatsApp messages instead of calling the API."""

    def __init__(self):
        self.messages = []
        self.fail = False
        self.raise_for = set()

    def send_text(self, to, body):
        return self._record(to, body, [])

    def send_buttons(self, to, body, buttons):
        return self._record(to, body, list(buttons))

    def _record(self, to, body, buttons):
        if to in self.raise_for:
            raise RuntimeError(f"transport exploded for {to}")
        self.messages.append(SentMessage(to=to, body=body, buttons=buttons))
        return not self.fail

    def to(self, phone):
        return [m for m in self.messages if m.to == phone]


@pytest.fixture
def sender(monkeypatch):
    fake = FakeSender()
    monkeypatch.setattr("messaging.client.get_sender", lambda: fake)
    return fake


@pytest.fixture
def tenant(db):
    return Tenant.objects.create(
        name="Batiment Test",
        industry=Tenant.Industry.BTP,
        work_start_time=time(8, 0),
        max_work_hours=12,
        timezone="Europe/Paris",
    )


@pytest.fixture
def site(tenant):
    return Site.objects.create(
        tenant=tenant,
        name="Chantier Nord",
        latitude=48.8566,
        longitude=2.3522,
        radius=300,
    )


@pytest.fixture
def manager(tenant):
    return register_employee(
        tenant=tenant,
        phone_number="+33 6 00 00 00 01",
        name="Marie Martin",
        role=Employee.Role.MANAGER,
    )


@pytest.fixture
def second_manager(tenant):
    return register_employee(
        tenant=tenant,
        phone_number="+33 6 00 00 00 09",
        name="Luc Petit",
        role=Employee.Role.MANAGER,
    )


@pytest.fixture
def employee(tenant, site):
    return register_employee(
        tenant=tenant,
        phone_number="+33 6 00 00 00 02",
        name="Jean Dupont",
        site=site,
    )


@pytest.fixture
def staff_user(db):
    return get_user_model().objects.create_user(
        username="staff",
        password="testpass123",
        is_staff=True,
    )


@pytest.fixture
def staff_client(staff_user):
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client


@pytest.fixture
def api_client():
    return APIClient()
