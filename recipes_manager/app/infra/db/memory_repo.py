# recipes_manager/app/infra/db/memory_repo.py
from __future__ import annotations

import logging
import random
from typing import Optional

from recipes_manager.app.domain.ids import RecipeID
from recipes_manager.app.domain.models import Recipe, RecipePicture
from recipes_manager.app.infra.db.base import RecipeQuery, RecipeRepository
from recipes_manager.app.infra.db.locks import ReadWriteLock
from recipes_manager.app.infra.storage.base import PictureStore
from recipes_manager.app.infra.storage.memory_store import InMemoryPictureStore

logger = logging.getLogger(__name__)


class InMemoryRecipeRepository(RecipeRepository):
    """Insertion-ordered recipe collection guarded by a readers-writer lock."""

    def __init__(
        self,
        pictures: PictureStore | None = None,
        rng: random.Random | None = None,
    ):
        super().__init__(pictures or InMemoryPictureStore())
        self._recipes: dict[RecipeID, Recipe] = {}
        self._lock = ReadWriteLock()
        self._rng = rng or random.Random()
        logger.info("InMemoryRecipeRepository initialized")

    def num(self) -> int:
        with self._lock.read():
            return len(self._recipes)

    def ids(self, query: Optional[RecipeQuery] = None) -> list[RecipeID]:
        with self._lock.read():
            if query is None or query.is_empty:
                return list(self._recipes)
            return [recipe_id for recipe_id, recipe in self._recipes.items() if query.matches(recipe)]

    def get(self, recipe_id: RecipeID) -> Recipe:
        with self._lock.read():
            recipe = self._recipes.get(recipe_id)
        if recipe is None:
            logger.debug("Recipe not found: %s", recipe_id)
            return Recipe.not_found()
        return recipe

    def random(self) -> Recipe:
        with self._lock.read():
            if not self._recipes:
                return Recipe.not_found()
            return self._rng.choice(list(self._recipes.values()))

    def add(self, recipe: Recipe) -> RecipeID:
        recipe_id = RecipeID.new()
        with self._lock.write():
            self._recipes[recipe_id] = recipe.with_id(recipe_id)
        logger.info("Added recipe: id=%s, name=%s", recipe_id, recipe.name)
        return recipe_id

    def update(self, recipe_id: RecipeID, recipe: Recipe) -> bool:
        with self._lock.write():
            if recipe_id not in self._recipes:
                return False
            self._recipes[recipe_id] = recipe.with_id(recipe_id)
        logger.info("Updated recipe: id=%s", recipe_id)
        return True

    def delete(self, recipe_id: RecipeID) -> bool:
        with self._lock.write():
            if recipe_id not in self._recipes:
                return False
            # a failing picture store leaves the recipe in place
            self.pictures.remove_all(recipe_id)
            del self._recipes[recipe_id]
        logger.info("Deleted recipe: id=%s", recipe_id)
        return True

    def add_picture(self, recipe_id: RecipeID, name: str, picture: str) -> bool:
        with self._lock.write():
            recipe = self._recipes.get(recipe_id)
            if recipe is None:
                return False
            self.pictures.put(RecipePicture(id=recipe_id, name=name, picture=picture))
            if name not in recipe.picture_links:
                self._recipes[recipe_id] = recipe.with_picture_links((*recipe.picture_links, name))
        return True

    def remove_picture(self, recipe_id: RecipeID, name: str) -> bool:
        with self._lock.write():
            recipe = self._recipes.get(recipe_id)
            if recipe is None or name not in recipe.picture_links:
                return False
            self.pictures.remove(recipe_id, name)
            self._recipes[recipe_id] = recipe.with_picture_links(
                link for link in recipe.picture_links if link != name
            )
        logger.info("Removed picture: recipe=%s, name=%s", recipe_id, name)
        return True
