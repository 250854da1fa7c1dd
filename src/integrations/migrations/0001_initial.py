import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Integration",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="cree le")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="modifie le")),
                ("provider", models.CharField(
                    choices=[("WHATSAPP", "WhatsApp Cloud API")],
                    max_length=30,
                    verbose_name="fournisseur",
                )),
                ("key", models.CharField(max_length=60, verbose_name="cle")),
                ("value", models.TextField(verbose_name="valeur chiffree")),
                ("is_enabled", models.BooleanField(default=True, verbose_name="active")),
            ],
            options={
                "verbose_name": "Integration",
                "verbose_name_plural": "Integrations",
                "ordering": ["provider", "key"],
                "unique_together": {("provider", "key")},
            },
        ),
    ]
