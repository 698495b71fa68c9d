"""Customer address book."""

from django.conf import settings
from django.db import models, transaction


class CustomerAddress(models.Model):
    """A saved delivery address; each customer has at most one default."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="addresses",
    )
    label = models.CharField(max_length=50, blank=True)
    name = models.CharField(max_length=255)
    phone = models.CharField(max_length=20)
    address_line_1 = models.CharField(max_length=255)
    address_line_2 = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100)
    district = models.CharField(max_length=100, blank=True)
    division = models.CharField(max_length=100, blank=True)
    postal_code = models.CharField(max_length=20, blank=True)
    is_default = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-is_default", "-created_at"]
        verbose_name_plural = "customer addresses"

    def __str__(self):
        return f"{self.name}, {self.city}"

    @transaction.atomic
    def set_as_default(self):
        CustomerAddress.objects.filter(user=self.user).exclude(pk=self.pk).update(is_default=False)
        self.is_default = True
        self.save(update_fields=["is_default", "updated_at"])
        return self

    def as_dict(self):
        """Snapshot stored on orders."""
        return {
            "name": self.name,
            "phone": self.phone,
            "address_line_1": self.address_line_1,
            "address_line_2": self.address_line_2,
            "city": self.city,
            "district": self.district,
            "division": self.division,
            "postal_code": self.postal_code,
        }

    @property
    def full_address(self):
        parts = [
            self.address_line_1,
            self.address_line_2,
            self.city,
            self.district,
            self.division,
            self.postal_code,
        ]
        return ", ".join(part for part in parts if part)
