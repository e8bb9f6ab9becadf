"""Bookstore storefront: cart service, catalog lookups and HTTP routes."""
