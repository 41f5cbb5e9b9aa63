"""Shared helpers for the API."""
