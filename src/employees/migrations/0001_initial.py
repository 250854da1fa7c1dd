import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("tenants", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Employee",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="cree le")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="modifie le")),
                ("phone_number", models.CharField(
                    help_text="Chiffres uniquement, indicatif pays inclus, sans '+' (ex: 33612345678).",
                    max_length=20,
                    unique=True,
                    verbose_name="telephone",
                )),
                ("name", models.CharField(blank=True, default="", max_length=255, verbose_name="nom")),
                ("role", models.CharField(
                    choices=[("MANAGER", "Manager"), ("EMPLOYEE", "Employe")],
                    db_index=True,
                    default="EMPLOYEE",
                    max_length=20,
                    verbose_name="role",
                )),
                ("is_active", models.BooleanField(default=True, verbose_name="actif")),
                ("conversation_state", models.CharField(
                    blank=True,
                    choices=[
                        ("awaiting_photo", "En attente de la photo du justificatif"),
                        ("awaiting_amount", "En attente du montant"),
                        ("awaiting_category", "En attente de la categorie"),
                    ],
                    max_length=30,
                    null=True,
                    verbose_name="etat de conversation",
                )),
                ("temp_expense_data", models.JSONField(
                    blank=True,
                    help_text="Donnees accumulees pendant une conversation en cours.",
                    null=True,
                    verbose_name="donnees temporaires",
                )),
                ("last_nudge_sent_at", models.DateTimeField(
                    blank=True, null=True, verbose_name="derniere relance du matin",
                )),
                ("site", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="employees",
                    to="tenants.site",
                    verbose_name="site de rattachement",
                )),
                ("tenant", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="employees",
                    to="tenants.tenant",
                    verbose_name="entreprise",
                )),
            ],
            options={
                "verbose_name": "Employe",
                "verbose_name_plural": "Employes",
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["tenant", "role"], name="employee_tenant_role_idx"),
                ],
            },
        ),
    ]
