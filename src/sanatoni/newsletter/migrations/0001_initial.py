import django.utils.timezone
from django.db import migrations, models

import sanatoni.newsletter.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="NewsletterSubscriber",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("name", models.CharField(blank=True, max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("subscribed", "Subscribed"),
                            ("unsubscribed", "Unsubscribed"),
                            ("pending_verification", "Pending verification"),
                        ],
                        default="subscribed",
                        max_length=30,
                    ),
                ),
                ("verification_token", models.CharField(blank=True, max_length=64)),
                ("verified_at", models.DateTimeField(blank=True, null=True)),
                ("subscribed_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("unsubscribed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "unsubscribe_token",
                    models.CharField(
                        default=sanatoni.newsletter.models.unsubscribe_token, editable=False, max_length=64
                    ),
                ),
                ("preferences", models.JSONField(blank=True, default=dict)),
                ("source", models.CharField(default="website_footer", max_length=50)),
                ("ip_address", models.GenericIPAddressField(blank=True, null=True)),
                ("user_agent", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-subscribed_at", "-pk"],
            },
        ),
    ]
