"""In-game crafting recipe browser with ranked search."""

from .collector import RecipeCollector, collect_recipes
from .models import Ingredient, RecipeEntry
from .ranking import rank

__version__ = "1.0.0"

__all__ = ["Ingredient", "RecipeCollector", "RecipeEntry", "collect_recipes", "rank"]
