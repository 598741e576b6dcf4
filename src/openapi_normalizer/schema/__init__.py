"""Canonical JSON Schema models, normalizer and visitor."""
