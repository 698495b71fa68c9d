"""Move a guest's cart into their account when they sign in."""

from django.contrib.auth.signals import user_logged_in
from django.dispatch import receiver

from .cart import CART_TOKEN_SESSION_KEY, merge_guest_cart


@receiver(user_logged_in, dispatch_uid="store.merge_guest_cart")
def merge_cart_on_login(sender, request, user, **kwargs):
    if request is None or not hasattr(request, "session"):
        return
    token = request.session.pop(CART_TOKEN_SESSION_KEY, None)
    merge_guest_cart(token, user)
