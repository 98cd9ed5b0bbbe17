from django.conf import settings
from django.core.management import call_command
from django.core.management.base import BaseCommand


class Command(BaseCommand):
    help = "Serve the API on the port from the configuration file"

    def add_arguments(self, parser):
        parser.add_argument("--host", default="0.0.0.0")
        parser.add_argument("--noreload", action="store_true")

    def handle(self, *args, **options):
        address = f"{options['host']}:{settings.PORT}"
        self.stdout.write(f"Started server on port {settings.PORT}")
        call_command("runserver", address, use_reloader=not options["noreload"])
