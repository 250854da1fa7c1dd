import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("tenants", "0001_initial"),
        ("employees", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Expense",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="cree le")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="modifie le")),
                ("amount", models.DecimalField(
                    decimal_places=2,
                    max_digits=10,
                    validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
                    verbose_name="montant",
                )),
                ("category", models.CharField(
                    choices=[
                        ("REPAS", "\U0001f354 Repas"),
                        ("ESSENCE", "⛽ Essence"),
                        ("HOTEL", "\U0001f3e8 Hotel"),
                        ("MATERIEL", "\U0001f6e0️ Materiel"),
                    ],
                    max_length=20,
                    verbose_name="categorie",
                )),
                ("photo_url", models.CharField(max_length=500, verbose_name="justificatif")),
                ("status", models.CharField(
                    choices=[("PENDING", "En attente"), ("APPROVED", "Approuvee"), ("REJECTED", "Refusee")],
                    db_index=True,
                    default="PENDING",
                    max_length=20,
                    verbose_name="statut",
                )),
                ("date", models.DateTimeField(default=django.utils.timezone.now, verbose_name="date")),
                ("reviewed_at", models.DateTimeField(blank=True, null=True, verbose_name="traitee le")),
                ("employee", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="expenses",
                    to="employees.employee",
                    verbose_name="employe",
                )),
                ("reviewed_by", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="reviewed_expenses",
                    to="employees.employee",
                    verbose_name="traitee par",
                )),
                ("tenant", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="expenses",
                    to="tenants.tenant",
                    verbose_name="entreprise",
                )),
            ],
            options={
                "verbose_name": "Note de frais",
                "verbose_name_plural": "Notes de frais",
                "ordering": ["-date"],
            },
        ),
    ]
