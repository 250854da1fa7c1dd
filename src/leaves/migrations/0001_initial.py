import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("tenants", "0001_initial"),
        ("employees", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="LeaveRequest",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="cree le")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="modifie le")),
                ("reference", models.CharField(db_index=True, editable=False, max_length=8, verbose_name="reference")),
                ("start_date", models.DateField(verbose_name="date de debut")),
                ("end_date", models.DateField(verbose_name="date de fin")),
                ("reason", models.TextField(blank=True, default="", verbose_name="motif")),
                ("status", models.CharField(
                    choices=[("PENDING", "En attente"), ("APPROVED", "Approuvee"), ("REJECTED", "Refusee")],
                    db_index=True,
                    default="PENDING",
                    max_length=20,
                    verbose_name="statut",
                )),
                ("reviewed_at", models.DateTimeField(blank=True, null=True, verbose_name="traitee le")),
                ("employee", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="leave_requests",
                    to="employees.employee",
                    verbose_name="employe",
                )),
                ("reviewed_by", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="reviewed_leave_requests",
                    to="employees.employee",
                    verbose_name="traitee par",
                )),
                ("tenant", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="leave_requests",
                    to="tenants.tenant",
                    verbose_name="entreprise",
                )),
            ],
            options={
                "verbose_name": "Demande de conge",
                "verbose_name_plural": "Demandes de conge",
                "ordering": ["-created_at"],
            },
        ),
    ]
