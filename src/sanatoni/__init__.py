"""Sanatoni Mart storefront and back office."""
