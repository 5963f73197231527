"""Canonical domain records."""
