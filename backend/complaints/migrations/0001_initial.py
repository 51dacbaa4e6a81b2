import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Complaint",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("human_id", models.CharField(max_length=20, unique=True, verbose_name="Complaint ID")),
                ("title", models.CharField(max_length=200, verbose_name="Title")),
                ("description", models.TextField(verbose_name="Description")),
                ("category", models.CharField(choices=[("Road", "Road"), ("Water", "Water"), ("Electricity", "Electricity"), ("Sanitation", "Sanitation"), ("Other", "Other")], db_index=True, default="Other", max_length=20, verbose_name="Category")),
                ("department", models.CharField(choices=[("Public Works", "Public Works"), ("Water Supply", "Water Supply"), ("Electricity Board", "Electricity Board"), ("Sanitation Department", "Sanitation Department"), ("General", "General")], db_index=True, default="General", max_length=30, verbose_name="Department")),
                ("status", models.CharField(choices=[("Pending", "Pending"), ("In Progress", "In Progress"), ("Resolved", "Resolved"), ("Rejected", "Rejected")], db_index=True, default="Pending", max_length=20, verbose_name="Status")),
                ("priority", models.CharField(choices=[("Low", "Low"), ("Medium", "Medium"), ("High", "High"), ("Urgent", "Urgent")], default="Medium", max_length=10, verbose_name="Priority")),
                ("address", models.CharField(blank=True, default="", max_length=500, verbose_name="Address")),
                ("latitude", models.FloatField(blank=True, null=True, verbose_name="Latitude")),
                ("longitude", models.FloatField(blank=True, null=True, verbose_name="Longitude")),
                ("image_url", models.URLField(blank=True, default="", max_length=500, verbose_name="Image URL")),
                ("resolved_at", models.DateTimeField(blank=True, null=True, verbose_name="Resolved At")),
                ("resolution_notes", models.TextField(blank=True, null=True, verbose_name="Resolution Notes")),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Updated At")),
                ("version", models.PositiveIntegerField(default=1, verbose_name="Version")),
                ("assigned_to", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="assigned_complaints", to=settings.AUTH_USER_MODEL, verbose_name="Assigned Officer")),
                ("submitted_by", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="submitted_complaints", to=settings.AUTH_USER_MODEL, verbose_name="Submitted By")),
            ],
            options={
                "verbose_name": "Complaint",
                "verbose_name_plural": "Complaints",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["-created_at"], name="complaint_recent_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ComplaintComment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("text", models.TextField(verbose_name="Text")),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Created At")),
                ("author", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="complaint_comments", to=settings.AUTH_USER_MODEL, verbose_name="Author")),
                ("complaint", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="comments", to="complaints.complaint", verbose_name="Complaint")),
            ],
            options={
                "verbose_name": "Complaint Comment",
                "verbose_name_plural": "Complaint Comments",
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="ComplaintStatusChange",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("status", models.CharField(choices=[("Pending", "Pending"), ("In Progress", "In Progress"), ("Resolved", "Resolved"), ("Rejected", "Rejected")], max_length=20, verbose_name="Status")),
                ("changed_at", models.DateTimeField(verbose_name="Changed At")),
                ("notes", models.TextField(blank=True, default="", verbose_name="Notes")),
                ("changed_by", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="complaint_status_changes", to=settings.AUTH_USER_MODEL, verbose_name="Changed By")),
                ("complaint", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="status_history", to="complaints.complaint", verbose_name="Complaint")),
            ],
            options={
                "verbose_name": "Complaint Status Change",
                "verbose_name_plural": "Complaint Status Changes",
                "ordering": ["changed_at", "id"],
            },
        ),
    ]
