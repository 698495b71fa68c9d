from django import template

register = template.Library()

ADDRESS_FIELDS = ("address_line_1", "address_line_2", "city", "district", "division", "postal_code")


@register.filter
def address_lines(address):
    """Non-empty lines of an address dict, for emails and invoices."""
    address = address or {}
    return [address[field] for field in ADDRESS_FIELDS if address.get(field)]
