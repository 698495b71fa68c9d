"""Storefront views: cart, checkout, orders, tracking and wishlist."""

import logging

from django.contrib import messages
from django.db.models import Q
from django.http import JsonResponse
from django.shortcuts import get_object_or_404, redirect
from django.urls import reverse
from django.views import View
from django.views.decorators.http import require_POST

from sanatoni.account.models import CustomerAddress
from sanatoni.catalog.models import Product
from sanatoni.catalog.props import products_props
from sanatoni.core.access import deny
from sanatoni.core.http import expects_json, request_data
from sanatoni.core.mixins import CustomerMixin
from sanatoni.core.pages import flash_response, form_errors, paginate, render_page, validation_error

from .cart import Cart, merge_guest_cart
from .exceptions import StoreError
from .forms import (
    AddressForm,
    CartAddForm,
    CartUpdateForm,
    CheckoutForm,
    CouponForm,
    ShippingQuoteForm,
    TrackOrderForm,
    WishlistForm,
)
from .invoices import render_invoice
from .models import CartItem, Order, ShippingZone, Wishlist
from .props import cart_line_props, order_props, shipping_zone_props
from .services import (
    cancel_order,
    find_order_for_tracking,
    place_order,
    reorder,
    shipping_quote,
)

logger = logging.getLogger(__name__)

LAST_ORDER_SESSION_KEY = "last_order_id"
UNAUTHORIZED_MESSAGE = "Unauthorized action."


def cart_page_props(cart):
    lines = cart.lines()
    return {
        "cartItems": [cart_line_props(line) for line in lines],
        "cartSummary": cart.summary(lines).as_props(),
    }


# Cart


class CartView(View):
    """Show the cart, add to it, or empty it."""

    def get(self, request):
        return render_page(request, "Cart/Index", cart_page_props(Cart(request)))

    def post(self, request):
        form = CartAddForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("store:cart"))

        cart = Cart(request)
        try:
            cart.add(form.product, form.cleaned_data["quantity"])
        except StoreError as error:
            return flash_response(request, str(error), messages.ERROR, status=422)
        return flash_response(
            request, "Product added to cart successfully", cartCount=cart.count()
        )

    def delete(self, request):
        Cart(request).clear()
        return flash_response(
            request, "Cart cleared successfully", redirect_to=reverse("store:cart"), cartCount=0
        )


class CartItemView(View):
    """Change the quantity of a cart line or remove it."""

    def dispatch(self, request, *args, **kwargs):
        self.cart = Cart(request)
        self.item = get_object_or_404(CartItem.objects.select_related("product"), pk=kwargs["pk"])
        if not self.cart.owns(self.item):
            return deny(request, UNAUTHORIZED_MESSAGE)
        return super().dispatch(request, *args, **kwargs)

    def put(self, request, pk):
        form = CartUpdateForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("store:cart"))
        try:
            self.cart.update(self.item, form.cleaned_data["quantity"])
        except StoreError as error:
            return flash_response(request, str(error), messages.ERROR, status=422)
        return flash_response(request, "Cart updated successfully", cartCount=self.cart.count())

    patch = put
    post = put

    def delete(self, request, pk):
        self.cart.remove(self.item)
        return flash_response(request, "Item removed from cart", cartCount=self.cart.count())


def cart_count(request):
    return JsonResponse({"count": Cart(request).count()})


class CartCouponView(View):
    def post(self, request):
        form = CouponForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("store:cart"))

        check = Cart(request).apply_coupon(form.cleaned_data["coupon_code"])
        if not check.valid:
            return validation_error(
                request, {"coupon_code": [check.message]}, fallback=reverse("store:cart")
            )
        return flash_response(request, "Coupon applied successfully!")

    def delete(self, request):
        Cart(request).remove_coupon()
        return flash_response(request, "Coupon removed successfully!")


class MergeGuestCartView(CustomerMixin, View):
    """Merge a guest cart token into the signed-in user's cart."""

    def post(self, request):
        token = request_data(request).get("cart_token")
        if not token:
            return JsonResponse({"message": "Invalid parameters"}, status=400)
        merge_guest_cart(token, request.user)
        return JsonResponse({
            "message": "Cart merged successfully",
            "cartCount": Cart(request).count(),
        })


# Checkout


class CheckoutView(View):
    def get(self, request):
        cart = Cart(request)
        lines = cart.lines()
        if not lines:
            messages.error(
                request, "Your cart is empty. Add some products to proceed with checkout."
            )
            return redirect("store:cart")

        addresses = []
        if request.user.is_authenticated:
            addresses = [
                {"id": address.pk, **address.as_dict()}
                for address in CustomerAddress.objects.filter(user=request.user)
            ]
        return render_page(request, "Checkout/Index", {
            "cartItems": [cart_line_props(line) for line in lines],
            "cartSummary": cart.summary(lines).as_props(),
            "shippingZones": [
                shipping_zone_props(zone) for zone in ShippingZone.objects.filter(is_active=True)
            ],
            "customerAddresses": addresses,
        })

    def post(self, request):
        cart = Cart(request)
        if not cart.items().exists():
            return flash_response(request, "Your cart is empty.", messages.ERROR, status=422)

        data = request_data(request)
        form = CheckoutForm(data)
        shipping = AddressForm(data, prefix="shipping_address")
        same_billing = str(data.get("billing_same_as_shipping", "true")).lower() not in ("false", "0", "")
        billing = None if same_billing else AddressForm(data, prefix="billing_address")

        bound_forms = [form, shipping] + ([billing] if billing else [])
        if not all([f.is_valid() for f in bound_forms]):
            errors = {}
            for f in bound_forms:
                errors.update(form_errors(f))
            return validation_error(request, errors, fallback=reverse("store:checkout"))

        try:
            order = place_order(
                cart,
                customer_name=form.cleaned_data["customer_name"],
                customer_email=form.cleaned_data["customer_email"],
                customer_phone=form.cleaned_data["customer_phone"],
                shipping_address=shipping.cleaned_data,
                billing_address=billing.cleaned_data if billing else None,
                notes=form.cleaned_data["notes"],
            )
        except StoreError as error:
            logger.warning("Checkout failed: %s", error)
            return flash_response(
                request, f"Failed to place order: {error}", messages.ERROR, status=422
            )

        message = "Order placed successfully! You will receive a confirmation email shortly."
        if request.user.is_authenticated:
            target = reverse("store:order-detail", args=[order.pk])
        else:
            request.session[LAST_ORDER_SESSION_KEY] = order.pk
            target = reverse("store:checkout-complete")
        return flash_response(
            request, message, redirect_to=target, order=order_props(order), redirect=target
        )


class CheckoutCompleteView(View):
    """Confirmation page for guest orders."""

    def get(self, request):
        order_id = request.session.get(LAST_ORDER_SESSION_KEY)
        order = Order.objects.filter(pk=order_id).first() if order_id else None
        if order is None:
            return redirect("home")
        return render_page(request, "Checkout/Complete", {"order": order_props(order, detail=True)})


@require_POST
def calculate_shipping(request):
    form = ShippingQuoteForm(request_data(request))
    if not form.is_valid():
        return JsonResponse(
            {"message": "The given data was invalid.", "errors": form_errors(form)}, status=422
        )
    try:
        quote = shipping_quote(Cart(request), form.cleaned_data)
    except StoreError:
        return JsonResponse(
            {"error": "Unable to determine shipping cost for this location"}, status=400
        )
    return JsonResponse(quote)


# Orders


class OrderListView(CustomerMixin, View):
    def get(self, request):
        orders = (
            Order.objects.filter(user=request.user)
            .prefetch_related("items__product")
        )
        status = request.GET.get("status")
        if status:
            orders = orders.filter(status=status)
        search = request.GET.get("search", "").strip()
        if search:
            orders = orders.filter(
                Q(order_number__icontains=search) | Q(items__product__name__icontains=search)
            ).distinct()

        return render_page(request, "Orders/Index", {
            "orders": paginate(request, orders, 10, order_props),
            "orderStatuses": dict(Order.Status.choices),
            "filters": {"status": status or "", "search": search},
        })


class CustomerOrderMixin(CustomerMixin):
    """Loads ``self.order``, refusing orders of other customers."""

    def dispatch(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return self.handle_no_permission()
        self.order = get_object_or_404(
            Order.objects.prefetch_related("items__product", "status_history__changed_by"),
            pk=kwargs["pk"],
        )
        if not self.order.belongs_to(request.user):
            return deny(request, "Unauthorized to view this order.")
        return super().dispatch(request, *args, **kwargs)


class OrderDetailView(CustomerOrderMixin, View):
    def get(self, request, pk):
        return render_page(request, "Orders/Show", {"order": order_props(self.order, detail=True)})


class OrderCancelView(CustomerOrderMixin, View):
    def post(self, request, pk):
        try:
            cancel_order(self.order, request.user)
        except StoreError:
            return flash_response(
                request,
                "This order cannot be cancelled at this stage.",
                messages.ERROR,
                status=422,
            )
        return flash_response(request, "Order cancelled successfully.")


class OrderReorderView(CustomerOrderMixin, View):
    def post(self, request, pk):
        result = reorder(self.order, Cart(request))
        level = messages.SUCCESS if result.added else messages.WARNING
        return flash_response(
            request,
            result.message,
            level,
            redirect_to=reverse("store:cart"),
            added=result.added,
            unavailable=result.unavailable,
        )


class OrderInvoiceView(CustomerOrderMixin, View):
    def get(self, request, pk):
        return render_invoice(self.order, download=request.GET.get("download") == "1")


class TrackOrderView(View):
    """Guest order lookup by order number and email."""

    def get(self, request):
        return render_page(request, "Orders/TrackForm")

    def post(self, request):
        form = TrackOrderForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form), fallback=reverse("store:track"))

        order = find_order_for_tracking(form.cleaned_data["order_number"], form.cleaned_data["email"])
        if order is None:
            return flash_response(
                request,
                "Order not found with the provided details.",
                messages.ERROR,
                status=404,
                redirect_to=reverse("store:track"),
            )
        return render_page(request, "Orders/Track", {"order": order_props(order, detail=True)})


# Wishlist


def wishlist_item_props(entry):
    return {"id": entry.pk, "product_id": entry.product_id, "created_at": entry.created_at}


class WishlistView(CustomerMixin, View):
    def get(self, request):
        entries = list(
            Wishlist.objects.filter(user=request.user)
            .select_related("product", "product__category")
            .prefetch_related("product__images")
        )
        products = products_props([entry.product for entry in entries])
        return render_page(request, "Wishlist/Index", {
            "wishlistItems": [
                {**wishlist_item_props(entry), "product": product}
                for entry, product in zip(entries, products)
            ],
        })

    def post(self, request):
        form = WishlistForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form))

        entry, created = Wishlist.objects.get_or_create(user=request.user, product=form.product)
        if not created:
            if expects_json(request):
                return JsonResponse(
                    {"message": "Product is already in your wishlist", "inWishlist": True},
                    status=409,
                )
            return flash_response(request, "Product is already in your wishlist", messages.ERROR)
        return flash_response(
            request,
            "Product added to wishlist",
            inWishlist=True,
            wishlistItem=wishlist_item_props(entry),
        )


class WishlistEntryMixin(CustomerMixin):
    """Loads ``self.entry``, refusing entries of other customers."""

    def dispatch(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return self.handle_no_permission()
        self.entry = get_object_or_404(Wishlist.objects.select_related("product"), pk=kwargs["pk"])
        if self.entry.user_id != request.user.pk:
            return deny(request, UNAUTHORIZED_MESSAGE)
        return super().dispatch(request, *args, **kwargs)


class WishlistItemView(WishlistEntryMixin, View):
    def delete(self, request, pk):
        self.entry.delete()
        return flash_response(request, "Product removed from wishlist", inWishlist=False)


class WishlistMoveToCartView(WishlistEntryMixin, View):
    def post(self, request, pk):
        cart = Cart(request)
        if cart.contains(self.entry.product):
            return JsonResponse({"message": "Product is already in your cart"}, status=409)
        try:
            cart.add(self.entry.product, 1)
        except StoreError as error:
            return flash_response(request, str(error), messages.ERROR, status=422)
        self.entry.delete()
        return flash_response(request, "Product moved to cart successfully", cartCount=cart.count())


class WishlistToggleView(CustomerMixin, View):
    def post(self, request):
        form = WishlistForm(request_data(request))
        if not form.is_valid():
            return validation_error(request, form_errors(form))

        entry = Wishlist.objects.filter(user=request.user, product=form.product).first()
        if entry is not None:
            entry.delete()
            return JsonResponse({"message": "Product removed from wishlist", "inWishlist": False})
        entry = Wishlist.objects.create(user=request.user, product=form.product)
        return JsonResponse({
            "message": "Product added to wishlist",
            "inWishlist": True,
            "wishlistItem": wishlist_item_props(entry),
        })


def wishlist_check(request, product_pk):
    product = get_object_or_404(Product, pk=product_pk)
    if not request.user.is_authenticated:
        return JsonResponse({"inWishlist": False})
    exists = Wishlist.objects.filter(user=request.user, product=product).exists()
    return JsonResponse({"inWishlist": exists})
