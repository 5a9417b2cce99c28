import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="MemorialRequest",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=200)),
                ("birth_date", models.DateField()),
                ("death_date", models.DateField()),
                ("tribute", models.TextField(blank=True, null=True)),
                ("biography", models.TextField(blank=True, null=True)),
                ("profile_photo_url", models.CharField(blank=True, max_length=500, null=True)),
                ("cover_photo_url", models.CharField(blank=True, max_length=500, null=True)),
                ("photos", models.JSONField(blank=True, default=list)),
                ("videos", models.JSONField(blank=True, default=list)),
                ("audios", models.JSONField(blank=True, default=list)),
                ("requester_name", models.CharField(max_length=200)),
                ("requester_email", models.EmailField(max_length=254)),
                ("requester_phone", models.CharField(blank=True, max_length=50, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("in_review", "In Review"),
                            ("approved", "Approved"),
                            ("rejected", "Rejected"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("notes", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
