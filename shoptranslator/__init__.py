"""Storefront content translator."""
