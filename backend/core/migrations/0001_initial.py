import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("contenttypes", "0002_remove_content_type_name"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("type", models.CharField(choices=[("complaint_submitted", "Complaint Submitted"), ("complaint_assigned", "Complaint Assigned"), ("status_update", "Status Update"), ("complaint_resolved", "Complaint Resolved"), ("officer_assigned", "Officer Assigned"), ("comment_added", "Comment Added"), ("general", "General")], default="general", max_length=30, verbose_name="Type")),
                ("title", models.CharField(max_length=255, verbose_name="Title")),
                ("message", models.TextField(verbose_name="Message")),
                ("is_read", models.BooleanField(default=False, verbose_name="Read")),
                ("read_at", models.DateTimeField(blank=True, null=True, verbose_name="Read At")),
                ("object_id", models.PositiveIntegerField(blank=True, null=True, verbose_name="Related Object ID")),
                ("content_type", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, to="contenttypes.contenttype", verbose_name="Related Content Type")),
                ("recipient", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="notifications", to=settings.AUTH_USER_MODEL, verbose_name="Recipient")),
            ],
            options={
                "verbose_name": "Notification",
                "verbose_name_plural": "Notifications",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["recipient", "is_read", "-created_at"], name="notif_recipient_unread_idx"),
                    models.Index(fields=["recipient", "-created_at"], name="notif_recipient_recent_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="DeviceRegistration",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("token", models.CharField(max_length=512, verbose_name="Device Token")),
                ("platform", models.CharField(default="unknown", max_length=20, verbose_name="Platform")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="devices", to=settings.AUTH_USER_MODEL, verbose_name="User")),
            ],
            options={
                "verbose_name": "Device Registration",
                "verbose_name_plural": "Device Registrations",
                "constraints": [
                    models.UniqueConstraint(fields=("user", "token"), name="uniq_device_per_user"),
                ],
            },
        ),
    ]
