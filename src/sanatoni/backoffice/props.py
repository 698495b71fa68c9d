"""Serializers for back office pages."""

from sanatoni.catalog.props import category_props
from sanatoni.content.props import blog_category_props, post_props
from sanatoni.promotions.views import flash_sale_props


def choice_options(choices):
    return [{"value": value, "label": label} for value, label in choices]


def product_admin_props(product):
    return {
        "id": product.pk,
        "name": product.name,
        "slug": product.slug,
        "sku": product.sku,
        "description": product.description,
        "short_description": product.short_description,
        "price": product.price,
        "sale_price": product.sale_price,
        "manage_stock": product.manage_stock,
        "stock_quantity": product.stock_quantity,
        "allow_backorders": product.allow_backorders,
        "stock_status": product.stock_status,
        "featured": product.featured,
        "is_active": product.is_active,
        "status": product.status,
        "weight": product.weight,
        "image": product.primary_image,
        "meta_title": product.meta_title,
        "meta_description": product.meta_description,
        "category": category_props(product.category) if product.category_id else None,
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }


def category_admin_props(category, products_count=None):
    data = category_props(category, products_count)
    data.update({
        "is_active": category.is_active,
        "sort_order": category.sort_order,
        "meta_title": category.meta_title,
        "meta_description": category.meta_description,
        "parent": category.parent.name if category.parent_id else None,
    })
    return data


def flash_sale_admin_props(sale, detail=False):
    data = flash_sale_props(sale)
    data["products_count"] = sale.products.count()
    if detail:
        data["product_ids"] = list(sale.products.values_list("pk", flat=True))
    return data


def coupon_props(coupon, detail=False):
    data = {
        "id": coupon.pk,
        "code": coupon.code,
        "name": coupon.name,
        "description": coupon.description,
        "type": coupon.type,
        "value": coupon.value,
        "minimum_order_amount": coupon.minimum_order_amount,
        "usage_limit": coupon.usage_limit,
        "used_count": coupon.used_count,
        "per_customer_limit": coupon.per_customer_limit,
        "valid_from": coupon.valid_from,
        "valid_until": coupon.valid_until,
        "status": coupon.status,
        "is_valid": coupon.is_valid(),
    }
    if detail:
        data.update({
            "product_ids": list(coupon.products.values_list("pk", flat=True)),
            "category_ids": list(coupon.categories.values_list("pk", flat=True)),
            "usages": [
                {
                    "id": usage.pk,
                    "order_number": usage.order.order_number if usage.order_id else None,
                    "customer": usage.user.name if usage.user_id else usage.customer_email,
                    "discount_amount": usage.discount_amount,
                    "created_at": usage.created_at,
                }
                for usage in coupon.usages.select_related("order", "user").order_by("-created_at")[:20]
            ],
        })
    return data


def role_props(role):
    return {"id": role.pk, "name": role.name, "display_name": role.display_name}


def user_admin_props(user):
    return {
        "id": str(user.pk),
        "name": user.name,
        "email": user.email,
        "phone": user.phone,
        "status": user.status,
        "is_superuser": user.is_superuser,
        "roles": [role_props(role) for role in user.roles.all()],
        "last_login": user.last_login,
        "date_joined": user.date_joined,
    }


def post_admin_props(post, detail=False):
    data = post_props(post, detail=detail)
    data["updated_at"] = post.updated_at
    return data


def blog_category_admin_props(category):
    data = blog_category_props(category, getattr(category, "total_posts", None))
    data.update({
        "is_active": category.is_active,
        "sort_order": category.sort_order,
        "meta_title": category.meta_title,
        "meta_description": category.meta_description,
    })
    return data
