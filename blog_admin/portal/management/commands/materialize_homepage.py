from django.core.management.base import BaseCommand, CommandError

from portal import services
from portal.publisher import PublishOutcome


class Command(BaseCommand):
    help = "Rigenera il data file della homepage dalla configurazione salvata e pubblica (git add/commit/push)."

    def add_arguments(self, parser):
        parser.add_argument("--no-publish", action="store_true", help="Scrive solo il data file, niente git")

    def handle(self, *args, **options):
        publisher = services.get_publisher(background=False)
        config = services.get_homepage_store(publisher).read()

        if options["no_publish"]:
            if not publisher.write_data_file(config):
                raise CommandError(f"Could not write {publisher.data_file}")
            self.stdout.write(self.style.SUCCESS(f"data_file={publisher.data_file}"))
            return

        result = publisher.materialize(config)
        if result is None:
            raise CommandError(f"Could not write {publisher.data_file}")
        if result.outcome is PublishOutcome.FAILED:
            raise CommandError(f"Publish failed: {result.message} ({result.error})")
        style = self.style.WARNING if result.outcome is PublishOutcome.COMMITTED_NOT_PUSHED else self.style.SUCCESS
        self.stdout.write(style(f"data_file={publisher.data_file} outcome={result.outcome.value} {result.message}"))
