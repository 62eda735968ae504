"""Core business logic layer.

Subpackages:
- normalize: canonical ingredient identity
- shopping: aggregation, categorization, views and the list store
- pantry: pantry suppression of shopping list entries
"""
__all__ = ["normalize", "shopping", "pantry"]
