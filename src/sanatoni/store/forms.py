"""Cart, checkout and order tracking forms."""

from django import forms

from sanatoni.catalog.models import Product

from .cart import MAX_QUANTITY


class CartAddForm(forms.Form):
    product_id = forms.IntegerField()
    quantity = forms.IntegerField(min_value=1, max_value=MAX_QUANTITY, required=False)

    def clean_product_id(self):
        product = Product.objects.published().filter(pk=self.cleaned_data["product_id"]).first()
        if product is None:
            raise forms.ValidationError("The selected product is invalid.")
        self.product = product
        return product.pk

    def clean_quantity(self):
        return self.cleaned_data.get("quantity") or 1


class CartUpdateForm(forms.Form):
    quantity = forms.IntegerField(min_value=1, max_value=MAX_QUANTITY)


class CouponForm(forms.Form):
    coupon_code = forms.CharField(max_length=50)

    def clean_coupon_code(self):
        return self.cleaned_data["coupon_code"].strip().upper()


class ShippingQuoteForm(forms.Form):
    city = forms.CharField(max_length=255)
    district = forms.CharField(max_length=255, required=False)
    division = forms.CharField(max_length=255, required=False)
    postal_code = forms.CharField(max_length=20, required=False)


class AddressForm(forms.Form):
    """Shipping or billing address, bound with a ``shipping_address``/``billing_address`` prefix."""

    name = forms.CharField(max_length=255)
    phone = forms.CharField(max_length=20)
    address_line_1 = forms.CharField(max_length=255)
    address_line_2 = forms.CharField(max_length=255, required=False)
    city = forms.CharField(max_length=255)
    district = forms.CharField(max_length=255, required=False)
    division = forms.CharField(max_length=255, required=False)
    postal_code = forms.CharField(max_length=20, required=False)


class CheckoutForm(forms.Form):
    customer_name = forms.CharField(max_length=255)
    customer_email = forms.EmailField(max_length=255)
    customer_phone = forms.CharField(max_length=20)
    billing_same_as_shipping = forms.BooleanField(required=False)
    notes = forms.CharField(max_length=1000, required=False)


class TrackOrderForm(forms.Form):
    order_number = forms.CharField(max_length=32)
    email = forms.EmailField()


class WishlistForm(forms.Form):
    product_id = forms.IntegerField()

    def clean_product_id(self):
        product = Product.objects.filter(pk=self.cleaned_data["product_id"]).first()
        if product is None:
            raise forms.ValidationError("The selected product is invalid.")
        self.product = product
        return product.pk
