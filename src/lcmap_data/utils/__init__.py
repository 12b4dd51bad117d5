"""Shared utilities — cross-cutting helpers with no business logic.

Importable by any layer.
"""
