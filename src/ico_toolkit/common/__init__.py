"""Shared helpers that are not tied to a conversion stage."""
