"""Ingredient name normalization.

normalize(raw_name) maps a free-form ingredient name to the canonical key used
to merge shopping list entries: lower-case, no parentheticals or punctuation,
singular last word, synonyms folded. Pure function; results are memoised.
"""
import re
from functools import lru_cache
from typing import Dict

_PARENS_RE = re.compile(r"\([^)]*\)|\[[^\]]*\]")
_PUNCT_RE = re.compile(r"[^\w\s-]")
_SPACE_RE = re.compile(r"\s+")

IRREGULAR_PLURALS: Dict[str, str] = {
    "leaves": "leaf",
    "loaves": "loaf",
    "halves": "half",
    "knives": "knife",
    "calves": "calf",
    "geese": "goose",
    "mice": "mouse",
    "teeth": "tooth",
    "feet": "foot",
    "children": "child",
    "cloves": "clove",
    "olives": "olive",
    "chives": "chive",
    "anchovies": "anchovy",
    "cookies": "cookie",
    "brownies": "brownie",
    "pies": "pie",
    "veggies": "veggie",
    "smoothies": "smoothie",
    "calories": "calorie",
    "movies": "movie",
}

# Words ending in 's' that are already singular (or mass nouns)
INVARIANT_WORDS = {
    "asparagus", "couscous", "hummus", "molasses", "swiss", "citrus", "octopus",
    "grits", "brussels", "bass", "hibiscus", "cactus", "haggis", "schnapps", "jus",
}

SYNONYMS: Dict[str, str] = {
    "scallion": "green onion",
    "spring onion": "green onion",
    "salad onion": "green onion",
    "courgette": "zucchini",
    "aubergine": "eggplant",
    "coriander leaf": "cilantro",
    "fresh coriander": "cilantro",
    "garbanzo bean": "chickpea",
    "garbanzo": "chickpea",
    "icing sugar": "powdered sugar",
    "confectioners sugar": "powdered sugar",
    "confectioner sugar": "powdered sugar",
    "caster sugar": "superfine sugar",
    "plain flour": "all-purpose flour",
    "all purpose flour": "all-purpose flour",
    "ap flour": "all-purpose flour",
    "flour": "all-purpose flour",
    "bicarbonate of soda": "baking soda",
    "bicarb": "baking soda",
    "capsicum": "bell pepper",
    "sweet pepper": "bell pepper",
    "rocket": "arugula",
    "prawn": "shrimp",
    "mince": "ground beef",
    "minced beef": "ground beef",
    "beef mince": "ground beef",
    "double cream": "heavy cream",
    "whipping cream": "heavy cream",
    "single cream": "light cream",
    "cornflour": "cornstarch",
    "corn flour": "cornstarch",
    "tomato puree": "tomato paste",
    "kosher salt": "salt",
    "sea salt": "salt",
    "table salt": "salt",
    "extra virgin olive oil": "olive oil",
    "evoo": "olive oil",
    "black pepper": "pepper",
    "ground black pepper": "pepper",
}


def singularize(word: str) -> str:
    """Reduce one English word to its singular form using a small rule table."""
    if word in IRREGULAR_PLURALS:
        return IRREGULAR_PLURALS[word]
    if word in INVARIANT_WORDS or len(word) <= 3:
        return word
    if word.endswith("ies"):
        return word[:-3] + "y"  # berries -> berry
    if word.endswith("oes"):
        return word[:-2]  # tomatoes -> tomato
    if word.endswith(("sses", "ches", "shes", "xes", "zzes")):
        return word[:-2]  # radishes -> radish, boxes -> box
    if word.endswith(("ss", "us", "is")):
        return word
    if word.endswith("s"):
        return word[:-1]
    return word


def clean_name(raw_name: str) -> str:
    """Lower-case and strip parentheticals, punctuation and extra whitespace."""
    text = (raw_name or "").lower()
    text = _PARENS_RE.sub(" ", text)
    text = text.replace("'", "").replace("’", "")
    text = _PUNCT_RE.sub(" ", text)
    text = text.replace("_", " ")
    return _SPACE_RE.sub(" ", text).strip(" -")


@lru_cache(maxsize=4096)
def normalize(raw_name: str) -> str:
    """Return the canonical key for an ingredient name.

    Unrecognized names still get a stable key (the cleaned name), so novel
    ingredients are never dropped. Raises ValueError for an empty name.
    """
    if not isinstance(raw_name, str) or not raw_name.strip():
        raise ValueError("Ingredient name cannot be empty")
    cleaned = clean_name(raw_name)
    if not cleaned:
        return _SPACE_RE.sub(" ", raw_name.strip().lower())
    words = cleaned.split(" ")
    words[-1] = singularize(words[-1])
    key = " ".join(words)
    return SYNONYMS.get(key, key)


__all__ = ["normalize", "singularize", "clean_name", "SYNONYMS", "IRREGULAR_PLURALS"]
