"""Serializers turning catalog records into page props."""

from sanatoni.localization.content import localized_values
from sanatoni.promotions.services import flash_sales_by_product, price_for


def category_props(category, product_count=None):
    data = {
        "id": category.pk,
        "name": category.name,
        "slug": category.slug,
        "description": category.description,
        "image": category.image or None,
        "icon": category.icon or None,
        "parent_id": category.parent_id,
    }
    if product_count is not None:
        data["products_count"] = product_count
    return data


def flash_sale_summary(sale):
    if sale is None:
        return None
    return {
        "id": sale.pk,
        "name": sale.name,
        "discount_percentage": sale.discount_percentage,
        "end_date": sale.end_date,
        "time_remaining": sale.time_remaining(),
    }


def product_props(product, flash_sale=None, translated=None, detail=False):
    price = price_for(product, flash_sale)
    translated = translated or {}
    data = {
        "id": product.pk,
        "name": translated.get("name") or product.name,
        "slug": product.slug,
        "sku": product.sku,
        "short_description": translated.get("short_description") or product.short_description,
        "price": product.price,
        "sale_price": product.sale_price,
        "display_price": price.unit_price,
        "is_on_sale": price.unit_price < product.price,
        "in_stock": product.in_stock,
        "stock_status": product.stock_status,
        "featured": product.featured,
        "image": product.primary_image,
        "category": category_props(product.category) if product.category_id else None,
        "flash_sale": flash_sale_summary(price.flash_sale),
    }
    if detail:
        data.update({
            "description": translated.get("description") or product.description,
            "stock_quantity": product.stock_quantity if product.manage_stock else None,
            "weight": product.weight,
            "dimensions": product.dimensions,
            "specifications": product.specifications,
            "images": [
                {"id": image.pk, "path": image.image_path, "alt": image.alt_text, "is_primary": image.is_primary}
                for image in product.images.all()
            ],
            "meta_title": product.meta_title or product.name,
            "meta_description": product.meta_description or product.short_description,
        })
    return data


def products_props(products, detail=False):
    """Serialize many products with one flash sale and one translation lookup."""
    products = list(products)
    sales = flash_sales_by_product([product.pk for product in products])
    translations = localized_values(products)
    return [
        product_props(
            product,
            flash_sale=sales.get(product.pk),
            translated=translations.get(product.pk),
            detail=detail,
        )
        for product in products
    ]
