"""Shared helpers that are independent of the domain."""
