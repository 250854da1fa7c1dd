"""Seed database with a demo tenant for development."""
from datetime import time

from django.core.management.base import BaseCommand


class Command(BaseCommand):
    help = "Seed database with a demo tenant, a site, a manager and employees"

    DEMO_EMPLOYEES = [
        {"name": "Marie Martin", "phone_number": "+33 6 00 00 00 01", "role": "MANAGER"},
        {"name": "Jean Dupont", "phone_number": "+33 6 00 00 00 02", "role": "EMPLOYEE"},
        {"name": "Paul Bernard", "phone_number": "+33 6 00 00 00 03", "role": "EMPLOYEE"},
    ]

    def add_arguments(self, parser):
        parser.add_argument("--flush", action="store_true", help="Delete the demo tenant first")

    def handle(self, *args, **options):
        from tenants.models import Tenant

        if options["flush"]:
            self.stdout.write("Flushing demo tenant...")
            Tenant.objects.filter(name="Demo BTP").delete()

        self.stdout.write("Seeding data...")
        tenant = self._create_tenant()
        site = self._create_site(tenant)
        employees = self._create_employees(tenant, site)

        self.stdout.write(self.style.SUCCESS(
            f"Seed complete: 1 tenant, 1 site, {len(employees)} employees"
        ))

    def _create_tenant(self):
        from tenants.models import Tenant
        tenant, _ = Tenant.objects.get_or_create(
            name="Demo BTP",
            defaults={
                "industry": Tenant.Industry.BTP,
                "work_start_time": time(8, 0),
                "max_work_hours": 12,
                "default_latitude": 48.8566,
                "default_longitude": 2.3522,
            },
        )
        return tenant

    def _create_site(self, tenant):
        from tenants.models import Site
        site, _ = Site.objects.get_or_create(
            tenant=tenant,
            name="Chantier Rivoli",
            defaults={"latitude": 48.8606, "longitude": 2.3376, "radius": 300},
        )
        return site

    def _create_employees(self, tenant, site):
        from employees.models import Employee
        from employees.phones import normalize_phone
        from employees.services import register_employee

        employees = []
        for data in self.DEMO_EMPLOYEES:
            existing = Employee.objects.filter(phone_number=normalize_phone(data["phone_number"], tenant.country)).first()
            if existing:
                employees.append(existing)
                continue
            employees.append(register_employee(tenant=tenant, site=site, **data))
        return employees
