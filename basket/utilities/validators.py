"""
Input validation schemas using Pydantic for better data integrity.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Union

from basket.domain.Ingredient import IngredientRef
from basket.domain.Quantity import Quantity, parse_amount, parse_scale
from basket.domain.errors import InvalidScale

Amount = Union[int, float, str]


def _check_scale(v):
    try:
        parse_scale(v)
    except InvalidScale as e:
        raise ValueError(str(e)) from None
    return v


class IngredientInput(BaseModel):
    """Schema for one already parsed ingredient line."""
    name: str = Field(..., min_length=1, max_length=200)
    quantity: Optional[Amount] = None
    unit: Optional[str] = Field(None, max_length=30)
    note: Optional[str] = Field(None, max_length=200)

    @field_validator('name')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace."""
        v = v.strip()
        if not v:
            raise ValueError('Ingredient name cannot be empty')
        return v

    @field_validator('quantity')
    @classmethod
    def validate_quantity(cls, v):
        """Quantities must be non-negative numbers or fractions like '1 1/2'."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        parse_amount(v)
        return v

    def to_ref(self, recipe_id: str, scale) -> IngredientRef:
        quantity = Quantity(self.quantity, self.unit) if self.quantity is not None else None
        return IngredientRef(self.name, quantity, self.note, recipe_id, scale)


class AddRecipeInput(BaseModel):
    """Schema for adding a known recipe (from the recipe file) to the shopping list."""
    recipe: str = Field(..., min_length=1)
    scale: Amount = 1
    request_id: Optional[str] = Field(None, max_length=100)

    @field_validator('scale')
    @classmethod
    def validate_scale(cls, v):
        return _check_scale(v)


class AddItemsInput(BaseModel):
    """Schema for adding externally parsed ingredient lines attributed to a recipe."""
    recipe_id: str = Field(..., min_length=1, max_length=200)
    scale: Amount = 1
    ingredients: List[IngredientInput]
    request_id: Optional[str] = Field(None, max_length=100)

    @field_validator('scale')
    @classmethod
    def validate_scale(cls, v):
        return _check_scale(v)

    @field_validator('ingredients')
    @classmethod
    def validate_ingredients(cls, v):
        """Ensure at least one ingredient is sent."""
        if not v:
            raise ValueError('At least one ingredient is required')
        return v


class CompletionInput(BaseModel):
    """Schema for explicitly checking/unchecking an entry."""
    completed: bool
