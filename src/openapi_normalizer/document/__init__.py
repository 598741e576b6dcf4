"""Canonical OpenAPI document models and the document converter."""
