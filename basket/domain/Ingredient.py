"""IngredientRef domain entity: one parsed ingredient line of a recipe, at the scale it was added."""
from typing import Optional

from basket.domain.Quantity import Quantity, parse_scale


class IngredientRef:
    """Immutable reference to an already parsed ingredient line.

    The upstream recipe parser splits a line into (quantity, unit, name, note);
    the engine only reads these records.
    """

    __slots__ = ("raw_name", "quantity", "note", "source_recipe_id", "source_scale")

    def __init__(self, raw_name: str, quantity: Optional[Quantity] = None, note: Optional[str] = None,
                 source_recipe_id: str = "", source_scale=1):
        if not isinstance(raw_name, str) or not raw_name.strip():
            raise ValueError("Ingredient name cannot be empty")
        object.__setattr__(self, "raw_name", raw_name.strip())
        object.__setattr__(self, "quantity", quantity)
        object.__setattr__(self, "note", note.strip() if isinstance(note, str) and note.strip() else None)
        object.__setattr__(self, "source_recipe_id", str(source_recipe_id))
        object.__setattr__(self, "source_scale", parse_scale(source_scale))

    def __setattr__(self, name, value):
        raise AttributeError("IngredientRef is immutable")

    def effective_quantity(self) -> Optional[Quantity]:
        '''Returns the quantity multiplied by the source scale (None for unquantified lines).'''
        if self.quantity is None:
            return None
        return Quantity(self.quantity.amount * self.source_scale, self.quantity.unit)

    def with_source(self, recipe_id: str, scale) -> "IngredientRef":
        '''Returns a copy attributed to a recipe at a scale.'''
        return IngredientRef(self.raw_name, self.quantity, self.note, recipe_id, scale)

    def __eq__(self, other) -> bool:
        if not isinstance(other, IngredientRef):
            return NotImplemented
        return (self.raw_name, self.quantity, self.note, self.source_recipe_id, self.source_scale) == \
            (other.raw_name, other.quantity, other.note, other.source_recipe_id, other.source_scale)

    def __hash__(self) -> int:
        return hash((self.raw_name, self.quantity, self.note, self.source_recipe_id, self.source_scale))

    def __str__(self) -> str:
        parts = [self.raw_name]
        if self.quantity is not None:
            parts.insert(0, self.quantity.display())
        text = " ".join(parts)
        if self.note:
            text += f" ({self.note})"
        return text

    def __repr__(self) -> str:
        return (f"IngredientRef({self.raw_name!r}, {self.quantity!r}, note={self.note!r}, "
                f"recipe={self.source_recipe_id!r}, scale={str(self.source_scale)!r})")

    @staticmethod
    def from_dict(data, recipe_id: Optional[str] = None, scale=None):
        '''Creates an IngredientRef from a dictionary. Ignores unknown keys.

        Accepts the persisted form ({raw_name, quantity: {amount, unit}, ...}) and the
        flat recipe form ({name, quantity, unit, note}).
        '''
        d = dict(data) if isinstance(data, dict) else {}
        name = d.get("raw_name") or d.get("name") or ""
        qty = d.get("quantity")
        if isinstance(qty, dict):
            quantity = Quantity.from_dict(qty)
        elif qty is None or qty == "":
            quantity = None
        else:
            quantity = Quantity(qty, d.get("unit"))
        return IngredientRef(
            name,
            quantity,
            d.get("note"),
            recipe_id if recipe_id is not None else d.get("source_recipe_id", ""),
            scale if scale is not None else d.get("source_scale", 1),
        )

    def to_dict(self):
        '''Converts the IngredientRef to a dictionary for JSON persistence.'''
        return {
            "raw_name": self.raw_name,
            "quantity": self.quantity.to_dict() if self.quantity is not None else None,
            "note": self.note,
            "source_recipe_id": self.source_recipe_id,
            "source_scale": str(self.source_scale),
        }

