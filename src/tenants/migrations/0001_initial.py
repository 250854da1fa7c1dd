import datetime
import uuid

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Tenant",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="cree le")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="modifie le")),
                ("name", models.CharField(max_length=255, verbose_name="nom")),
                ("industry", models.CharField(
                    choices=[
                        ("BTP", "BTP"),
                        ("RETAIL", "Commerce"),
                        ("CLEANING", "Proprete"),
                        ("SECURITY", "Securite"),
                        ("OFFICE", "Bureau"),
                        ("GENERIC", "Generique"),
                    ],
                    default="GENERIC",
                    max_length=20,
                    verbose_name="secteur",
                )),
                ("country", models.CharField(default="FR", max_length=2, verbose_name="pays")),
                ("plan", models.CharField(
                    choices=[
                        ("TRIAL", "Essai"),
                        ("STARTER", "Starter"),
                        ("PRO", "Pro"),
                        ("ENTERPRISE", "Entreprise"),
                    ],
                    default="TRIAL",
                    max_length=20,
                    verbose_name="offre",
                )),
                ("config", models.JSONField(
                    blank=True,
                    default=dict,
                    help_text="Surcharges des fonctionnalites du modele sectoriel (enable_gps, ...).",
                    verbose_name="fonctionnalites",
                )),
                ("vocabulary", models.JSONField(
                    blank=True,
                    default=dict,
                    help_text="Surcharges du vocabulaire du modele sectoriel (workplace, action_in, ...).",
                    verbose_name="vocabulaire",
                )),
                ("work_start_time", models.TimeField(default=datetime.time(9, 0), verbose_name="heure de debut")),
                ("max_work_hours", models.PositiveIntegerField(
                    default=12,
                    validators=[django.core.validators.MinValueValidator(1)],
                    verbose_name="duree max de session (h)",
                )),
                ("timezone", models.CharField(default="Europe/Paris", max_length=64, verbose_name="fuseau horaire")),
                ("default_latitude", models.FloatField(blank=True, null=True, verbose_name="latitude par defaut")),
                ("default_longitude", models.FloatField(blank=True, null=True, verbose_name="longitude par defaut")),
                ("is_active", models.BooleanField(default=True, verbose_name="actif")),
            ],
            options={
                "verbose_name": "Entreprise cliente",
                "verbose_name_plural": "Entreprises clientes",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Site",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="cree le")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="modifie le")),
                ("name", models.CharField(max_length=255, verbose_name="nom")),
                ("address", models.TextField(blank=True, default="", verbose_name="adresse")),
                ("latitude", models.FloatField(blank=True, null=True, verbose_name="latitude")),
                ("longitude", models.FloatField(blank=True, null=True, verbose_name="longitude")),
                ("radius", models.PositiveIntegerField(blank=True, null=True, verbose_name="rayon autorise (m)")),
                ("is_active", models.BooleanField(default=True, verbose_name="actif")),
                ("tenant", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="sites",
                    to="tenants.tenant",
                    verbose_name="entreprise",
                )),
            ],
            options={
                "verbose_name": "Site",
                "verbose_name_plural": "Sites",
                "ordering": ["name"],
                "unique_together": {("tenant", "name")},
            },
        ),
    ]
