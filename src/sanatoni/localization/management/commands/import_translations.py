"""Management command to load JSON translation files into the database."""

from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from sanatoni.localization import conf
from sanatoni.localization.services import TranslationService


class Command(BaseCommand):
    help = "Import lang/<locale>/<group>.json files into the translations table"

    def add_arguments(self, parser):
        parser.add_argument("--locale", help="Only import this locale")
        parser.add_argument("--path", help="Directory holding <locale>/<group>.json files")

    def handle(self, *args, **options):
        service = TranslationService(lang_dir=options["path"])
        locales = [options["locale"]] if options["locale"] else conf.get_supported_locales()

        total = 0
        for locale in locales:
            if not conf.is_supported(locale):
                raise CommandError(f"Unsupported locale: {locale}")
            directory = Path(service.lang_dir) / locale
            files = sorted(directory.glob("*.json"))
            if not files:
                self.stdout.write(self.style.WARNING(f"  No translation files for {locale}"))
                continue
            for path in files:
                count = service.import_from_file(locale, path)
                total += count
                self.stdout.write(self.style.SUCCESS(f"  {locale}/{path.name}: {count} keys"))

        self.stdout.write(self.style.SUCCESS(f"\nImported {total} translations"))
