from getpass import getpass

from django.core.management.base import BaseCommand, CommandError

from accounts.services import UserService


class Command(BaseCommand):
    help = "Create a user who can log in to the booking API"

    def add_arguments(self, parser):
        parser.add_argument("username")
        parser.add_argument("--password", help="Prompted for when omitted")
        parser.add_argument("--lecturer", action="store_true", help="Allow the user to manage courses")

    def handle(self, *args, **options):
        service = UserService()
        username = options["username"]
        if service.get_user(username) is not None:
            raise CommandError(f"User {username} already exists")

        password = options["password"] or getpass("Password: ")
        if not password:
            raise CommandError("A password is required")

        user = service.add_user(username, password, options["lecturer"])
        role = "lecturer" if options["lecturer"] else "participant"
        self.stdout.write(self.style.SUCCESS(f"Created {role} {user.username} (id {user.pk})"))
