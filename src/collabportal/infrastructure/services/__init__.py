"""Outbound infrastructure services."""
