import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ProcessedMessage",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="cree le")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="modifie le")),
                ("message_id", models.CharField(max_length=255, unique=True, verbose_name="identifiant WhatsApp")),
                ("phone_number", models.CharField(blank=True, default="", max_length=20, verbose_name="expediteur")),
                ("message_type", models.CharField(blank=True, default="", max_length=30, verbose_name="type")),
            ],
            options={
                "verbose_name": "Message traite",
                "verbose_name_plural": "Messages traites",
                "ordering": ["-created_at"],
            },
        ),
    ]
