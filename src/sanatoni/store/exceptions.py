"""Store exceptions."""


class StoreError(Exception):
    """Base exception for cart, checkout and order errors."""


class EmptyCartError(StoreError):
    """Checkout was attempted with an empty cart."""

    def __init__(self, message="Your cart is empty."):
        super().__init__(message)


class ShippingUnavailableError(StoreError):
    """No active shipping zone can deliver to the address."""

    def __init__(self, message="Shipping is not available to your location."):
        super().__init__(message)


class InsufficientStockError(StoreError):
    """A product does not have enough stock for the requested quantity."""

    def __init__(self, product, requested, available):
        self.product = product
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {product.name}. Only {available} items available."
        )


class ProductUnavailableError(StoreError):
    """The product is unpublished or inactive."""

    def __init__(self, product=None):
        self.product = product
        name = product.name if product is not None else "This product"
        super().__init__(f"{name} is not available.")


class OrderNotCancellableError(StoreError):
    """Only pending and processing orders can be cancelled."""

    def __init__(self, order):
        self.order = order
        super().__init__("This order cannot be cancelled.")
