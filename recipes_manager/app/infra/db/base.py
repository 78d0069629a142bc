# recipes_manager/app/infra/db/base.py
"""
Abstract base class for the recipe repository.
This interface allows easy swapping between different persistence backends.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from recipes_manager.app.domain.ids import RecipeID
from recipes_manager.app.domain.models import Recipe, RecipePicture
from recipes_manager.app.infra.storage.base import PictureStore


def _contains(haystack: str, needle: str) -> bool:
    return needle.casefold() in haystack.casefold()


@dataclass(frozen=True)
class RecipeQuery:
    """
    Filters over the recipe collection. Every supplied filter must match;
    matching is case-insensitive substring containment.
    """
    name: Optional[str] = None
    description: Optional[str] = None
    ingredient: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not (self.name or self.description or self.ingredient)

    def matches(self, recipe: Recipe) -> bool:
        if self.name and not _contains(recipe.name, self.name):
            return False
        if self.description and not _contains(recipe.description, self.description):
            return False
        if self.ingredient and not any(
            _contains(ingredient.name, self.ingredient) for ingredient in recipe.ingredients
        ):
            return False
        return True


class RecipeRepository(ABC):
    """
    Abstract interface for the authoritative recipe collection.

    Lookups signal "not found" with the invalid RecipeID sentinel instead of
    raising. Storage faults raise RecipeRepositoryError.

    Implementations:
    - InMemoryRecipeRepository: process-local collection
    - SupabaseRecipeRepository: Postgres table via Supabase
    """

    def __init__(self, pictures: PictureStore):
        self.pictures = pictures

    @abstractmethod
    def num(self) -> int:
        """Number of stored recipes."""
        pass

    @abstractmethod
    def ids(self, query: Optional[RecipeQuery] = None) -> list[RecipeID]:
        """
        Ids of recipes matching all filters of `query`, in stored order.

        Args:
            query: Filters to apply; None or an empty query selects everything

        Returns:
            List of ids, empty if nothing matches
        """
        pass

    @abstractmethod
    def get(self, recipe_id: RecipeID) -> Recipe:
        """
        Get a recipe by id.

        Returns:
            The recipe, or Recipe.not_found() if the id is unknown
        """
        pass

    @abstractmethod
    def random(self) -> Recipe:
        """
        A uniformly chosen recipe.

        Returns:
            The recipe, or Recipe.not_found() if the collection is empty
        """
        pass

    @abstractmethod
    def add(self, recipe: Recipe) -> RecipeID:
        """
        Store a recipe under a freshly assigned id. Any id on `recipe` is ignored.

        Returns:
            The assigned id
        """
        pass

    @abstractmethod
    def update(self, recipe_id: RecipeID, recipe: Recipe) -> bool:
        """
        Replace a stored recipe, keeping its id.

        Returns:
            True if replaced, False if the id is unknown
        """
        pass

    @abstractmethod
    def delete(self, recipe_id: RecipeID) -> bool:
        """
        Remove a recipe and all of its pictures.

        Returns:
            True if removed, False if the id is unknown
        """
        pass

    @abstractmethod
    def add_picture(self, recipe_id: RecipeID, name: str, picture: str) -> bool:
        """
        Attach a picture and list it in the recipe's picture links.

        Returns:
            True if attached, False if the recipe is unknown
        """
        pass

    @abstractmethod
    def remove_picture(self, recipe_id: RecipeID, name: str) -> bool:
        """
        Detach a picture from the recipe and the picture store.

        Returns:
            True if detached, False if the recipe or picture is unknown
        """
        pass

    def picture(self, recipe_id: RecipeID, name: str) -> RecipePicture:
        """
        Get a picture of a recipe. Only pictures listed in the recipe's
        picture links are reachable.

        Returns:
            The picture, or RecipePicture.not_found() if missing
        """
        recipe = self.get(recipe_id)
        if not recipe.is_found or name not in recipe.picture_links:
            return RecipePicture.not_found(name)
        return self.pictures.get(recipe_id, name)
