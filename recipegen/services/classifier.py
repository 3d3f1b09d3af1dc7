"""
Heuristics that turn free-form model output into a title, an ingredient
list and a meal category.

The model is asked for bold section headers but nothing guarantees it
complies, so every function here is total: odd input degrades to a
placeholder instead of raising.
"""
from __future__ import annotations

import re
from typing import Protocol

from recipegen.app.domain.models import (
    MAX_TITLE_LENGTH,
    Category,
    DirectRequest,
    GenerationRequest,
    ParsedRecipe,
)

PLACEHOLDER_TITLE = "Generated Recipe"
FALLBACK_INGREDIENTS = ("Mixed ingredients",)

_TITLE_SKIP_PREFIXES = ("Ingredients:", "Instructions:")
_HEADING_RE = re.compile(r"^#+\s*")
_LIST_ITEM_RE = re.compile(r"^\d+\.")
_LIST_MARKER_RE = re.compile(r"^(?:[-•]|\d+\.)\s*")
_TEA_RE = re.compile(r"\bteas?\b")
_COFFEE_RE = re.compile(r"\bcoffees?\b")

_BEVERAGE_PATTERNS = (
    re.compile(r"\b(boba|bubble)\s+tea\b"),
    re.compile(r"\b(iced?|hot)\s+(tea|coffee|chocolate)\b"),
    re.compile(r"\b(green|black|herbal|chai)\s+tea\b"),
    re.compile(r"\b(smoothie|milkshake|frappuccino|latte|cappuccino|espresso|macchiato)\b"),
    re.compile(r"\b(juice|lemonade|punch|cocktail|mocktail|lassi)\b"),
    re.compile(r"\b(matcha|bubble|boba)\b.*\b(tea|drink|latte)\b"),
)

_DESSERT_KEYWORDS = (
    "cake", "cookie", "cookies", "pie", "ice cream", "gelato", "sorbet", "candy", "dessert",
    "pudding", "mousse", "tart", "brownie", "brownies", "donut", "donuts", "pastry", "custard",
    "tiramisu", "cheesecake", "fudge", "truffle", "macaron", "cupcake", "cupcakes",
    "chocolate cake", "sweet treat", "sundae", "parfait",
)
_DESSERT_PATTERNS = (
    re.compile(r"\bchocolate\b.*\b(cake|dessert|sweet|treat)\b"),
    re.compile(r"\bsweet\b.*\b(treat|dessert|cake)\b"),
)

_BREAKFAST_KEYWORDS = (
    "pancake", "pancakes", "waffle", "waffles", "cereal", "oatmeal", "breakfast",
    "toast", "bagel", "muffin", "muffins", "croissant", "french toast",
    "eggs benedict", "scrambled eggs", "fried eggs", "omelet", "omelette",
    "breakfast burrito", "breakfast sandwich", "granola", "hash brown", "hash browns",
)
_BREAKFAST_PATTERNS = (re.compile(r"\beggs?\b.*\b(scrambled|fried|poached|benedict)\b"),)

_SNACK_KEYWORDS = (
    "chips", "dip", "crackers", "nuts", "popcorn", "pretzel", "pretzels", "trail mix",
    "appetizer", "finger food", "chicken wings", "buffalo wings", "nachos",
    "cheese balls", "deviled eggs", "stuffed", "bites", "snack",
)
_SNACK_PATTERNS = (re.compile(r"\bstuffed\b.*\b(mushroom|pepper|olive)\b"),)

_LUNCH_KEYWORDS = (
    "sandwich", "wrap", "wraps", "salad", "soup", "burger", "burgers", "pizza",
    "panini", "sub", "submarine", "club sandwich", "pasta salad", "chicken salad",
    "tuna salad", "lunch", "quesadilla", "tacos", "burrito",
)
_LUNCH_PATTERNS = (re.compile(r"\b(chicken|tuna|egg|caesar)\s+salad\b"),)

# Checked in this order after the beverage test; first match wins.
_CATEGORY_RULES = (
    (Category.DESSERT, _DESSERT_KEYWORDS, _DESSERT_PATTERNS),
    (Category.BREAKFAST, _BREAKFAST_KEYWORDS, _BREAKFAST_PATTERNS),
    (Category.SNACK, _SNACK_KEYWORDS, _SNACK_PATTERNS),
    (Category.LUNCH, _LUNCH_KEYWORDS, _LUNCH_PATTERNS),
)


def extract_title(recipe_text: str) -> str:
    for line in recipe_text.splitlines():
        trimmed = line.strip()
        if not trimmed or trimmed.startswith(_TITLE_SKIP_PREFIXES):
            continue
        title = _HEADING_RE.sub("", trimmed).replace("**", "")
        return title[:MAX_TITLE_LENGTH]
    return PLACEHOLDER_TITLE


def extract_ingredients(recipe_text: str) -> list[str]:
    ingredients: list[str] = []
    in_section = False

    for line in recipe_text.splitlines():
        trimmed = line.strip()
        lowered = trimmed.replace("**", "").lower()
        if "ingredients:" in lowered:
            in_section = True
            continue
        if "instructions:" in lowered or "directions:" in lowered:
            break
        if not in_section or not trimmed:
            continue
        if trimmed.startswith(("-", "•")) or _LIST_ITEM_RE.match(trimmed):
            ingredient = _LIST_MARKER_RE.sub("", trimmed).strip()
            if ingredient:
                ingredients.append(ingredient)

    return ingredients or list(FALLBACK_INGREDIENTS)


def _is_beverage(title: str) -> bool:
    if any(pattern.search(title) for pattern in _BEVERAGE_PATTERNS):
        return True
    if "drink" in title or "beverage" in title:
        return True
    if _TEA_RE.search(title) and "tea leaf" not in title and "tea spice" not in title:
        return True
    return bool(_COFFEE_RE.search(title)) and "coffee bean" not in title and "coffee rub" not in title


def classify_category(recipe_title: str, recipe_text: str = "") -> Category:
    # matched against the title only
    title = recipe_title.lower()

    if _is_beverage(title):
        return Category.BEVERAGE

    for category, keywords, patterns in _CATEGORY_RULES:
        if any(keyword in title for keyword in keywords):
            return category
        if any(pattern.search(title) for pattern in patterns):
            return category

    return Category.DINNER


class RecipeParser(Protocol):
    """Turns raw generated text into structured recipe fields."""

    def parse(self, recipe_text: str, request: GenerationRequest) -> ParsedRecipe:
        ...


class HeuristicRecipeParser:
    """Line-oriented parser for markdown-ish prose answers."""

    def parse(self, recipe_text: str, request: GenerationRequest) -> ParsedRecipe:
        title = extract_title(recipe_text)
        if isinstance(request, DirectRequest):
            ingredients = extract_ingredients(recipe_text)
        else:
            ingredients = list(request.ingredients)
        return ParsedRecipe(
            title=title,
            ingredients=ingredients,
            category=classify_category(title, recipe_text),
            instructions=recipe_text,
        )
