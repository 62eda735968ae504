"""Errors raised by the shopping list engine."""


class ShoppingListError(Exception):
    """Base class for shopping list errors."""


class EntryNotFound(ShoppingListError, KeyError):
    """Raised when toggling or removing an entry/contribution that does not exist."""

    def __init__(self, key: str, recipe_id: str | None = None):
        self.key = key
        self.recipe_id = recipe_id
        if recipe_id is None:
            message = f"Shopping list entry '{key}' not found"
        else:
            message = f"No contribution from recipe '{recipe_id}' on entry '{key}'"
        super().__init__(message)

    def __str__(self) -> str:
        return self.args[0]


class InvalidScale(ShoppingListError, ValueError):
    """Raised when a scale factor is zero, negative or not a finite number."""

    def __init__(self, factor):
        self.factor = factor
        super().__init__(f"Scale factor must be greater than 0, got {factor!r}")


class PersistenceFailure(ShoppingListError):
    """Raised when the shopping list cannot be loaded from or saved to storage."""


__all__ = ["ShoppingListError", "EntryNotFound", "InvalidScale", "PersistenceFailure"]
