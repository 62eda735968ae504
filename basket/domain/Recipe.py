"""Recipe domain entity: name, servings, structured ingredient lines, steps, tags."""
from typing import List, Optional

from basket.domain.Ingredient import IngredientRef
from basket.domain.Quantity import parse_scale


class Recipe:
    def __init__(self, name: str = "", servings: int = 0, ingredients: Optional[List[IngredientRef]] = None,
                 steps: Optional[List[str]] = None, tags: Optional[List[str]] = None, image: str = ""):
        self.name = name
        self.servings = servings
        self.ingredients = ingredients[:] if ingredients else []
        self.steps = steps[:] if steps else []
        self.tags = tags[:] if tags else []
        self.image = image

    @property
    def recipe_id(self) -> str:
        # Recipes are addressed by name, as in the recipe file
        return self.name

    def __str__(self) -> str:
        return f"{self.name} - {self.servings} servings - {len(self.ingredients)} ingredients - Tags: {', '.join(self.tags)}"

    __repr__ = __str__

    def contributions(self, scale=1) -> List[IngredientRef]:
        '''Returns the ingredient lines attributed to this recipe at the given scale.'''
        factor = parse_scale(scale)
        return [ing.with_source(self.recipe_id, factor) for ing in self.ingredients]

    def scaled_dict(self, scale=1):
        '''Dictionary form with quantities multiplied by the scale (for recipe detail responses).'''
        factor = parse_scale(scale)
        data = self.to_dict()
        data["scale"] = str(factor)
        servings = self.servings * factor
        data["servings"] = servings.numerator if servings.denominator == 1 else str(servings)
        lines = []
        for ref in self.contributions(factor):
            qty = ref.effective_quantity()
            lines.append({
                "name": ref.raw_name,
                "quantity": str(qty.amount) if qty is not None else None,
                "unit": qty.unit if qty is not None else None,
                "display": qty.display() if qty is not None else "",
                "note": ref.note,
            })
        data["ingredients"] = lines
        return data

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        name = str(d.get("name", "")).strip()
        ingredients = [IngredientRef.from_dict(ing, recipe_id=name, scale=1)
                       for ing in d.get("ingredients", []) if isinstance(ing, dict)]
        return Recipe(
            name=name,
            servings=int(d.get("servings", 0) or 0),
            ingredients=ingredients,
            steps=list(d.get("steps", [])),
            tags=list(d.get("tags", [])),
            image=d.get("image", "") or "",
        )

    def to_dict(self):
        return {
            "name": self.name,
            "servings": self.servings,
            "ingredients": [
                {
                    "name": ing.raw_name,
                    "quantity": str(ing.quantity.amount) if ing.quantity is not None else None,
                    "unit": ing.quantity.unit if ing.quantity is not None else None,
                    "note": ing.note,
                }
                for ing in self.ingredients
            ],
            "steps": self.steps,
            "tags": self.tags,
            "image": self.image,
        }
