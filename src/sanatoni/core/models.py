"""Core models for Sanatoni Mart: users, roles and permissions."""

import uuid

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models
from django.utils import timezone

ADMIN = "admin"
MANAGER = "manager"
SALESPERSON = "salesperson"

ADMIN_ACCESS_ROLES = (ADMIN, MANAGER)


def _as_list(value):
    """Accept a single name, a model instance or an iterable of either."""
    if isinstance(value, (str, models.Model)):
        value = [value]
    return [getattr(item, "name", item) for item in value]


class Permission(models.Model):
    """A named capability, grouped for display and bulk assignment."""

    name = models.CharField(max_length=100, unique=True)
    display_name = models.CharField(max_length=150)
    description = models.TextField(blank=True)
    group = models.CharField(max_length=50, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["group", "name"]

    def __str__(self):
        return self.display_name or self.name


class Role(models.Model):
    """A named bundle of permissions assigned to users."""

    name = models.CharField(max_length=50, unique=True)
    display_name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    permissions = models.ManyToManyField(Permission, related_name="roles", blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.display_name or self.name

    def has_permission(self, permission):
        name = getattr(permission, "name", permission)
        return self.permissions.filter(name=name).exists()

    def give_permission_to(self, *permissions):
        for permission in permissions:
            if isinstance(permission, str):
                permission = Permission.objects.get(name=permission)
            self.permissions.add(permission)
        return self

    def sync_permissions(self, permissions):
        names = _as_list(permissions)
        self.permissions.set(Permission.objects.filter(name__in=names))
        return self


class UserManager(BaseUserManager):
    """Custom user manager using email as the unique identifier."""

    def create_user(self, email, password=None, **extra_fields):
        """Create and save a regular user with the given email and password."""
        if not email:
            raise ValueError("Users must have an email address")
        email = self.normalize_email(email)
        extra_fields.setdefault("name", email.split("@")[0])
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """Create and save a superuser with the given email and password."""
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self.create_user(email, password, **extra_fields)


class User(AbstractUser):
    """Store account using email as the username.

    Customers, salespeople, managers and administrators all share this model;
    what separates them is the set of roles assigned through ``UserRole``.
    """

    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        INACTIVE = "inactive", "Inactive"
        SUSPENDED = "suspended", "Suspended"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)
    username = None
    first_name = None
    last_name = None

    name = models.CharField(max_length=255)
    phone = models.CharField(max_length=20, blank=True)
    profile_picture = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)
    last_login_ip = models.GenericIPAddressField(null=True, blank=True)
    preferences = models.JSONField(default=dict, blank=True)

    roles = models.ManyToManyField(
        Role,
        through="UserRole",
        through_fields=("user", "role"),
        related_name="users",
        blank=True,
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"

    def __str__(self):
        return self.email

    def get_full_name(self):
        return self.name

    def get_short_name(self):
        return self.name.split(" ")[0] if self.name else self.email

    def get_display_name(self):
        """Get display name for the user."""
        if self.name:
            return self.name
        return self.email.split("@")[0]

    # Roles

    def _active_roles(self):
        return self.roles.filter(is_active=True)

    def role_names(self):
        return list(self._active_roles().values_list("name", flat=True))

    def has_role(self, roles):
        """True when the user holds the role, or any of the roles given."""
        return self._active_roles().filter(name__in=_as_list(roles)).exists()

    def has_any_role(self, roles):
        return self.has_role(roles)

    def has_all_roles(self, roles):
        wanted = set(_as_list(roles))
        return wanted.issubset(set(self.role_names()))

    def assign_role(self, role, assigned_by=None):
        if isinstance(role, str):
            role = Role.objects.get(name=role)
        UserRole.objects.update_or_create(
            user=self,
            role=role,
            defaults={"assigned_at": timezone.now(), "assigned_by": assigned_by},
        )
        return self

    def remove_role(self, role):
        name = getattr(role, "name", role)
        UserRole.objects.filter(user=self, role__name=name).delete()
        return self

    def sync_roles(self, roles, assigned_by=None):
        names = set(_as_list(roles))
        UserRole.objects.filter(user=self).exclude(role__name__in=names).delete()
        current = set(self.roles.values_list("name", flat=True))
        for role in Role.objects.filter(name__in=names - current):
            self.assign_role(role, assigned_by=assigned_by)
        return self

    def is_admin(self):
        return self.has_role(ADMIN)

    def is_manager(self):
        return self.has_role(MANAGER)

    def is_salesperson(self):
        return self.has_role(SALESPERSON)

    def has_admin_access(self):
        return self.is_superuser or self.has_any_role(ADMIN_ACCESS_ROLES)

    # Permissions

    def role_permission_names(self):
        """Names of every permission granted through the user's active roles."""
        return list(
            Permission.objects.filter(roles__users=self, roles__is_active=True)
            .values_list("name", flat=True)
            .distinct()
            .order_by("name")
        )

    def has_permission(self, permission):
        name = getattr(permission, "name", permission)
        return Permission.objects.filter(
            name=name, roles__users=self, roles__is_active=True
        ).exists()

    def has_any_permission(self, permissions):
        return Permission.objects.filter(
            name__in=_as_list(permissions), roles__users=self, roles__is_active=True
        ).exists()

    def record_login(self, ip_address):
        self.last_login_ip = ip_address
        self.save(update_fields=["last_login_ip"])


class UserRole(models.Model):
    """Assignment of a role to a user, with who assigned it and when."""

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="role_assignments")
    role = models.ForeignKey(Role, on_delete=models.CASCADE, related_name="assignments")
    assigned_at = models.DateTimeField(default=timezone.now)
    assigned_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user", "role"], name="unique_user_role"),
        ]

    def __str__(self):
        return f"{self.user} → {self.role}"
