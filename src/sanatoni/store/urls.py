from django.urls import path

from . import views

app_name = "store"

urlpatterns = [
    # Cart
    path("cart/", views.CartView.as_view(), name="cart"),
    path("cart/count/", views.cart_count, name="cart-count"),
    path("cart/coupon/", views.CartCouponView.as_view(), name="cart-coupon"),
    path("cart/merge-guest/", views.MergeGuestCartView.as_view(), name="cart-merge"),
    path("cart/<int:pk>/", views.CartItemView.as_view(), name="cart-item"),
    # Checkout
    path("checkout/", views.CheckoutView.as_view(), name="checkout"),
    path("checkout/calculate-shipping/", views.calculate_shipping, name="checkout-shipping"),
    path("checkout/complete/", views.CheckoutCompleteView.as_view(), name="checkout-complete"),
    # Orders
    path("track-order/", views.TrackOrderView.as_view(), name="track"),
    path("orders/", views.OrderListView.as_view(), name="order-list"),
    path("orders/<int:pk>/", views.OrderDetailView.as_view(), name="order-detail"),
    path("orders/<int:pk>/cancel/", views.OrderCancelView.as_view(), name="order-cancel"),
    path("orders/<int:pk>/reorder/", views.OrderReorderView.as_view(), name="order-reorder"),
    path("orders/<int:pk>/invoice/", views.OrderInvoiceView.as_view(), name="order-invoice"),
    # Wishlist
    path("wishlist/", views.WishlistView.as_view(), name="wishlist"),
    path("wishlist/toggle/", views.WishlistToggleView.as_view(), name="wishlist-toggle"),
    path("wishlist/check/<int:product_pk>/", views.wishlist_check, name="wishlist-check"),
    path("wishlist/<int:pk>/", views.WishlistItemView.as_view(), name="wishlist-item"),
    path("wishlist/<int:pk>/move-to-cart/", views.WishlistMoveToCartView.as_view(), name="wishlist-move"),
]
