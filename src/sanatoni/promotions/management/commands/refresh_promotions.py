"""Management command to move flash sales and coupons to their date-driven status."""

from django.core.management.base import BaseCommand

from sanatoni.promotions.services import expire_coupons, refresh_flash_sale_statuses


class Command(BaseCommand):
    help = "Refresh flash sale statuses and expire used-up or lapsed coupons"

    def handle(self, *args, **options):
        sales = refresh_flash_sale_statuses()
        coupons = expire_coupons()
        self.stdout.write(self.style.SUCCESS(f"Flash sales updated: {sales}"))
        self.stdout.write(self.style.SUCCESS(f"Coupons expired: {coupons}"))
