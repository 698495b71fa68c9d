"""Default roles and permission catalogue."""

import logging

from django.db import transaction

from .models import ADMIN, MANAGER, SALESPERSON, Permission, Role

logger = logging.getLogger(__name__)

# (name, display name, description) grouped by area
PERMISSION_GROUPS = {
    "users": [
        ("view_users", "View Users", "Can view user list and details"),
        ("create_users", "Create Users", "Can create new users"),
        ("edit_users", "Edit Users", "Can edit user information"),
        ("delete_users", "Delete Users", "Can delete users"),
        ("manage_user_roles", "Manage User Roles", "Can assign/remove roles from users"),
    ],
    "products": [
        ("view_products", "View Products", "Can view product list and details"),
        ("create_products", "Create Products", "Can create new products"),
        ("edit_products", "Edit Products", "Can edit product information"),
        ("delete_products", "Delete Products", "Can delete products"),
        ("manage_inventory", "Manage Inventory", "Can manage product inventory"),
    ],
    "categories": [
        ("view_categories", "View Categories", "Can view category list and details"),
        ("create_categories", "Create Categories", "Can create new categories"),
        ("edit_categories", "Edit Categories", "Can edit category information"),
        ("delete_categories", "Delete Categories", "Can delete categories"),
    ],
    "orders": [
        ("view_orders", "View Orders", "Can view order list and details"),
        ("create_orders", "Create Orders", "Can create new orders"),
        ("edit_orders", "Edit Orders", "Can edit order information"),
        ("delete_orders", "Delete Orders", "Can delete orders"),
        ("process_orders", "Process Orders", "Can update order status and process orders"),
    ],
    "customers": [
        ("view_customers", "View Customers", "Can view customer list and details"),
        ("edit_customers", "Edit Customers", "Can edit customer information"),
        ("delete_customers", "Delete Customers", "Can delete customers"),
    ],
    "content": [
        ("view_content", "View Content", "Can view pages and content"),
        ("create_content", "Create Content", "Can create new pages and content"),
        ("edit_content", "Edit Content", "Can edit pages and content"),
        ("delete_content", "Delete Content", "Can delete pages and content"),
    ],
    "blog": [
        ("view_blog", "View Blog", "Can view blog posts"),
        ("create_blog", "Create Blog Posts", "Can create new blog posts"),
        ("edit_blog", "Edit Blog Posts", "Can edit blog posts"),
        ("delete_blog", "Delete Blog Posts", "Can delete blog posts"),
    ],
    "promotions": [
        ("view_promotions", "View Promotions", "Can view promotions and discounts"),
        ("create_promotions", "Create Promotions", "Can create new promotions and discounts"),
        ("edit_promotions", "Edit Promotions", "Can edit promotions and discounts"),
        ("delete_promotions", "Delete Promotions", "Can delete promotions and discounts"),
    ],
    "newsletter": [
        ("view_newsletter", "View Newsletter", "Can view newsletter subscribers and campaigns"),
        ("create_newsletter", "Create Newsletter", "Can create and send newsletters"),
        ("edit_newsletter", "Edit Newsletter", "Can edit newsletter content and settings"),
        ("delete_newsletter", "Delete Newsletter", "Can delete newsletter campaigns"),
    ],
    "reports": [
        ("view_reports", "View Reports", "Can view reports and analytics"),
        ("export_data", "Export Data", "Can export data and reports"),
    ],
    "settings": [
        ("view_settings", "View Settings", "Can view system settings"),
        ("edit_settings", "Edit Settings", "Can edit system settings"),
    ],
}

ROLES = [
    {
        "name": ADMIN,
        "display_name": "Administrator",
        "description": "Full system access with all permissions",
    },
    {
        "name": MANAGER,
        "display_name": "Manager",
        "description": "Management access for products, orders, and customers",
    },
    {
        "name": SALESPERSON,
        "display_name": "Salesperson",
        "description": "Limited access for order processing and customer service",
    },
]

MANAGER_GROUPS = [
    "products", "categories", "orders", "customers",
    "content", "blog", "promotions", "newsletter", "reports",
]

SALESPERSON_PERMISSIONS = [
    "view_orders", "edit_orders", "process_orders",
    "view_customers", "edit_customers",
    "view_products", "view_categories",
    "view_reports",
]


@transaction.atomic
def seed_roles_and_permissions():
    """Create the permission catalogue and default roles. Safe to re-run."""
    for group, entries in PERMISSION_GROUPS.items():
        for name, display_name, description in entries:
            Permission.objects.get_or_create(
                name=name,
                defaults={"display_name": display_name, "description": description, "group": group},
            )

    roles = {}
    for data in ROLES:
        role, _ = Role.objects.get_or_create(name=data["name"], defaults=data)
        roles[role.name] = role

    roles[ADMIN].permissions.set(Permission.objects.all())
    roles[MANAGER].permissions.set(Permission.objects.filter(group__in=MANAGER_GROUPS))
    roles[SALESPERSON].permissions.set(Permission.objects.filter(name__in=SALESPERSON_PERMISSIONS))

    logger.info("Seeded %d permissions and %d roles", Permission.objects.count(), len(roles))
    return roles
