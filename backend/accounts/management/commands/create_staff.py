"""
Management command: create_staff
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Creates (or updates) an **Officer** or **Admin** account.  Citizens
register themselves through the API; staff accounts are provisioned by
an operator with this command or through the Django admin.

The command is **idempotent** — running it again for an existing
username updates the role, names and activity flag and leaves the
password alone unless ``--password`` is given.

Usage::

    python manage.py create_staff alice alice@city.gov --role Officer \\
        --first-name Alice --last-name Moreno --password 'S3cret!pass'

    python manage.py create_staff root root@city.gov --role Admin --password 'S3cret!pass'
"""

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from accounts.models import UserRole

User = get_user_model()

STAFF_ROLES = (UserRole.OFFICER, UserRole.ADMIN)


class Command(BaseCommand):
    help = (
        "Creates or updates an Officer or Admin account.  Safe to run "
        "multiple times (idempotent)."
    )

    def add_arguments(self, parser):
        parser.add_argument("username")
        parser.add_argument("email")
        parser.add_argument(
            "--role",
            default=UserRole.OFFICER,
            choices=[str(role) for role in STAFF_ROLES],
        )
        parser.add_argument("--first-name", default="")
        parser.add_argument("--last-name", default="")
        parser.add_argument(
            "--password",
            help="Required when the account does not exist yet.",
        )
        parser.add_argument(
            "--inactive",
            action="store_true",
            help="Create the account deactivated (excluded from routing).",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        username = options["username"]
        fields = {
            "email": options["email"],
            "role": options["role"],
            "is_active": not options["inactive"],
        }
        # Only overwrite names that were actually supplied.
        if options["first_name"]:
            fields["first_name"] = options["first_name"]
        if options["last_name"]:
            fields["last_name"] = options["last_name"]

        user = User.objects.filter(username=username).first()
        if user is None:
            if not options["password"]:
                raise CommandError("--password is required for a new account.")
            if User.objects.filter(email__iexact=fields["email"]).exists():
                raise CommandError(f"Email '{fields['email']}' is already taken.")
            user = User.objects.create_user(
                username=username,
                password=options["password"],
                **fields,
            )
            verb = "Created"
        else:
            for name, value in fields.items():
                setattr(user, name, value)
            if options["password"]:
                user.set_password(options["password"])
            user.save()
            verb = "Updated"

        self.stdout.write(self.style.SUCCESS(
            f"  ✓ {verb} {user.role} '{user.username}' (#{user.pk})"
            f"{'' if user.is_active else ' [inactive]'}"
        ))
