"""Management command to publish scheduled blog posts that are due."""

from django.core.management.base import BaseCommand

from sanatoni.content.services.blog import publish_scheduled_posts


class Command(BaseCommand):
    help = "Publish scheduled blog posts whose publication time has passed"

    def handle(self, *args, **options):
        published = publish_scheduled_posts()
        self.stdout.write(self.style.SUCCESS(f"Published {published} scheduled posts"))
