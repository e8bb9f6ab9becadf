"""Storefront services: database access, repositories and money helpers."""
