"""Management command to seed roles, permissions and the first staff accounts."""

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from sanatoni.core.models import ADMIN, MANAGER
from sanatoni.core.roles import seed_roles_and_permissions

User = get_user_model()


STAFF_ACCOUNTS = [
    {"email": "admin@sanatonimart.com", "name": "Admin User", "role": ADMIN},
    {"email": "manager@sanatonimart.com", "name": "Store Manager", "role": MANAGER},
]


class Command(BaseCommand):
    help = "Seed roles and permissions, optionally creating admin and manager accounts"

    def add_arguments(self, parser):
        parser.add_argument(
            "--with-users",
            action="store_true",
            help="Also create the default admin and manager accounts",
        )
        parser.add_argument(
            "--password",
            default="password123",
            help="Password for newly created accounts",
        )

    def handle(self, *args, **options):
        self.stdout.write("\nSeeding roles and permissions...")
        roles = seed_roles_and_permissions()
        for role in roles.values():
            self.stdout.write(
                self.style.SUCCESS(f"  {role.display_name}: {role.permissions.count()} permissions")
            )

        if not options["with_users"]:
            return

        self.stdout.write("\nCreating staff accounts...")
        for account in STAFF_ACCOUNTS:
            user = User.objects.filter(email=account["email"]).first()
            if user:
                self.stdout.write(f"  Skipping existing user: {account['email']}")
            else:
                user = User.objects.create_user(
                    email=account["email"],
                    password=options["password"],
                    name=account["name"],
                )
                self.stdout.write(self.style.SUCCESS(f"  Created: {account['email']}"))
            user.assign_role(account["role"])

        self.stdout.write(self.style.SUCCESS("\nRole seed complete!"))
