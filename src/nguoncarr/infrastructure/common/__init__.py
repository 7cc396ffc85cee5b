"""Shared helpers for normalizing upstream data."""
