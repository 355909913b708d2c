"""Utility helpers for the Pivotal importer."""
