"""Catalog queries: storefront filtering, search and recently viewed products."""

from decimal import Decimal, InvalidOperation

from django.db.models import Count, Q

from .models import Category, Product

RECENTLY_VIEWED_SESSION_KEY = "recently_viewed"
RECENTLY_VIEWED_LIMIT = 20

SORT_FIELDS = {
    "price": "price",
    "name": "name",
    "created_at": "created_at",
    "newest": "created_at",
}


def _decimal(value):
    try:
        value = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return None
    return value if value.is_finite() else None


def search_filter(term):
    return (
        Q(name__icontains=term)
        | Q(description__icontains=term)
        | Q(short_description__icontains=term)
        | Q(sku__iexact=term)
    )


def filter_products(params, queryset=None):
    """Apply storefront filters from query parameters."""
    products = queryset if queryset is not None else Product.objects.published()
    products = products.select_related("category").prefetch_related("images")

    category = params.get("category")
    if category:
        if str(category).isdigit():
            products = products.filter(Q(category_id=category) | Q(category__parent_id=category))
        else:
            products = products.filter(Q(category__slug=category) | Q(category__parent__slug=category))

    min_price = _decimal(params.get("min_price"))
    if min_price is not None:
        products = products.filter(price__gte=min_price)
    max_price = _decimal(params.get("max_price"))
    if max_price is not None:
        products = products.filter(price__lte=max_price)

    search = (params.get("search") or "").strip()
    if search:
        products = products.filter(search_filter(search))

    if params.get("in_stock") in ("1", "true"):
        products = products.exclude(stock_status=Product.StockStatus.OUT_OF_STOCK)

    sort = SORT_FIELDS.get(params.get("sort"), "created_at")
    order = params.get("order", "desc" if sort == "created_at" else "asc")
    return products.order_by(f"-{sort}" if order == "desc" else sort, "pk")


def related_products(product, limit=4):
    if not product.category_id:
        return Product.objects.none()
    return (
        Product.objects.published()
        .filter(category_id=product.category_id)
        .exclude(pk=product.pk)
        .select_related("category")
        .prefetch_related("images")[:limit]
    )


def autocomplete(term, limit=10):
    if len(term) < 2:
        return []
    return list(
        Product.objects.published()
        .filter(search_filter(term))
        .select_related("category")
        .prefetch_related("images")[:limit]
    )


def categories_with_counts():
    return (
        Category.objects.active()
        .annotate(
            products_count=Count(
                "products",
                filter=Q(products__is_active=True, products__status=Product.Status.PUBLISHED),
            )
        )
        .order_by("sort_order", "name")
    )


def remember_product(request, product):
    """Put ``product`` at the front of the session's recently viewed list."""
    viewed = [pk for pk in request.session.get(RECENTLY_VIEWED_SESSION_KEY, []) if pk != product.pk]
    viewed.insert(0, product.pk)
    request.session[RECENTLY_VIEWED_SESSION_KEY] = viewed[:RECENTLY_VIEWED_LIMIT]


def recently_viewed(request, limit=10, exclude=None):
    ids = [pk for pk in request.session.get(RECENTLY_VIEWED_SESSION_KEY, []) if pk != exclude][:limit]
    products = Product.objects.published().filter(pk__in=ids).select_related("category").prefetch_related("images")
    by_id = {product.pk: product for product in products}
    return [by_id[pk] for pk in ids if pk in by_id]


def clear_recently_viewed(request):
    request.session.pop(RECENTLY_VIEWED_SESSION_KEY, None)
