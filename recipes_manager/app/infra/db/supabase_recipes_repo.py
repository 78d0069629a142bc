from __future__ import annotations

import json
import logging
import random
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from postgrest.exceptions import APIError
from supabase import Client, create_client

from recipes_manager.app.domain.errors import ConfigurationError, RecipeRepositoryError
from recipes_manager.app.domain.ids import RecipeID
from recipes_manager.app.domain.models import Ingredient, Recipe, RecipePicture
from recipes_manager.app.infra.db.base import RecipeQuery, RecipeRepository
from recipes_manager.app.infra.storage.base import PictureStore

logger = logging.getLogger(__name__)

_STORAGE_ERRORS = (APIError, ConnectionError, TimeoutError)

# attempts at swapping picture_links before giving up on a contended row
_LINK_RETRIES = 5


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _contains_pattern(term: str) -> str:
    """ILIKE pattern matching `term` literally anywhere in the column."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _create_supabase_client(url: Optional[str], key: Optional[str]) -> Client:
    if not url or not key:
        raise ConfigurationError(["SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY required"])
    return create_client(url, key)


def _row_to_recipe(row: dict[str, Any]) -> Recipe:
    return Recipe(
        id=RecipeID.parse(str(row["id"])),
        name=str(row.get("name") or ""),
        description=str(row.get("description") or ""),
        servings=int(row.get("servings") or 1),
        ingredients=tuple(
            Ingredient(
                name=str(item.get("name") or ""),
                amount=float(item.get("amount") or 0),
                unit=str(item.get("unit") or ""),
            )
            for item in row.get("ingredients") or []
        ),
        picture_links=tuple(row.get("picture_links") or []),
    )


def _recipe_to_row(recipe: Recipe) -> dict[str, Any]:
    return {
        "name": recipe.name,
        "description": recipe.description,
        "servings": recipe.servings,
        "ingredients": [
            {"name": i.name, "amount": i.amount, "unit": i.unit} for i in recipe.ingredients
        ],
        "picture_links": list(recipe.picture_links),
    }


class SupabaseRecipeRepository(RecipeRepository):
    def __init__(
        self,
        pictures: PictureStore,
        client: Client | None = None,
        url: Optional[str] = None,
        key: Optional[str] = None,
        table_name: str = "recipes",
        rng: random.Random | None = None,
    ):
        super().__init__(pictures)
        self._client = client or _create_supabase_client(url, key)
        self.table_name = table_name
        self._rng = rng or random.Random()
        logger.info("SupabaseRecipeRepository initialized: table=%s", table_name)

    def _table(self):
        return self._client.table(self.table_name)

    def num(self) -> int:
        try:
            result = self._table().select("id", count="exact").limit(1).execute()
        except _STORAGE_ERRORS as error:
            logger.error("Error counting recipes: %s", error)
            raise RecipeRepositoryError("num", str(error)) from error
        return getattr(result, "count", 0) or 0

    def ids(self, query: Optional[RecipeQuery] = None) -> list[RecipeID]:
        query = query or RecipeQuery()
        columns = "id,name,description,ingredients" if query.ingredient else "id"
        try:
            request = self._table().select(columns)
            if query.name:
                request = request.ilike("name", _contains_pattern(query.name))
            if query.description:
                request = request.ilike("description", _contains_pattern(query.description))
            result = request.order("created_at").execute()
        except _STORAGE_ERRORS as error:
            logger.error("Error listing recipes: %s", error)
            raise RecipeRepositoryError("ids", str(error)) from error

        rows = result.data or []
        if query.ingredient:
            # jsonb arrays cannot be substring-matched through the REST filters
            rows = [row for row in rows if query.matches(_row_to_recipe(row))]
        return [RecipeID.parse(str(row["id"])) for row in rows]

    def get(self, recipe_id: RecipeID) -> Recipe:
        if not recipe_id.is_valid:
            return Recipe.not_found()
        try:
            result = self._table().select("*").eq("id", str(recipe_id)).limit(1).execute()
        except _STORAGE_ERRORS as error:
            logger.error("Error fetching recipe %s: %s", recipe_id, error)
            raise RecipeRepositoryError("get", str(error)) from error

        if not result.data:
            logger.debug("Recipe not found: %s", recipe_id)
            return Recipe.not_found()
        return _row_to_recipe(result.data[0])

    def random(self) -> Recipe:
        total = self.num()
        if total == 0:
            return Recipe.not_found()
        offset = self._rng.randrange(total)
        try:
            result = self._table().select("*").order("created_at").range(offset, offset).execute()
        except _STORAGE_ERRORS as error:
            logger.error("Error fetching random recipe: %s", error)
            raise RecipeRepositoryError("random", str(error)) from error

        if not result.data:
            # rows deleted between count and fetch
            return Recipe.not_found()
        return _row_to_recipe(result.data[0])

    def add(self, recipe: Recipe) -> RecipeID:
        recipe_id = RecipeID.new()
        row = _recipe_to_row(recipe)
        row["id"] = str(recipe_id)
        row["created_at"] = _now_utc().isoformat()
        try:
            result = self._table().insert(row).execute()
        except _STORAGE_ERRORS as error:
            logger.error("Error adding recipe: %s", error)
            raise RecipeRepositoryError("add", str(error)) from error

        if not result.data:
            raise RecipeRepositoryError("add", "insert returned no rows")
        logger.info("Added recipe: id=%s, name=%s", recipe_id, recipe.name)
        return recipe_id

    def update(self, recipe_id: RecipeID, recipe: Recipe) -> bool:
        if not recipe_id.is_valid:
            return False
        return self._update_row(recipe_id, _recipe_to_row(recipe), "update")

    def delete(self, recipe_id: RecipeID) -> bool:
        if not recipe_id.is_valid:
            return False
        # pictures go first so a storage fault leaves the recipe in place for a retry
        self.pictures.remove_all(recipe_id)
        try:
            result = self._table().delete().eq("id", str(recipe_id)).execute()
        except _STORAGE_ERRORS as error:
            logger.error("Error deleting recipe %s: %s", recipe_id, error)
            raise RecipeRepositoryError("delete", str(error)) from error

        if not result.data:
            return False
        logger.info("Deleted recipe: id=%s", recipe_id)
        return True

    def add_picture(self, recipe_id: RecipeID, name: str, picture: str) -> bool:
        recipe = self.get(recipe_id)
        if not recipe.is_found:
            return False
        self.pictures.put(RecipePicture(id=recipe_id, name=name, picture=picture))
        return self._edit_links(
            recipe,
            "add_picture",
            lambda links: links if name in links else [*links, name],
        )

    def remove_picture(self, recipe_id: RecipeID, name: str) -> bool:
        recipe = self.get(recipe_id)
        if not recipe.is_found or name not in recipe.picture_links:
            return False
        self.pictures.remove(recipe_id, name)
        return self._edit_links(
            recipe,
            "remove_picture",
            lambda links: [link for link in links if link != name],
        )

    def _edit_links(
        self,
        recipe: Recipe,
        operation: str,
        edit: Callable[[list[str]], list[str]],
    ) -> bool:
        """
        Rewrite picture_links with a compare-and-swap on the value last read.

        The update only matches while the stored links still equal the ones
        `edit` was applied to; otherwise the row is re-read and the edit
        applied again.

        Returns:
            False if the recipe disappeared meanwhile, True once the links are written
        """
        for _ in range(_LINK_RETRIES):
            links = list(recipe.picture_links)
            updated = edit(links)
            if updated == links:
                return True
            try:
                result = (
                    self._table()
                    .update({"picture_links": updated})
                    .eq("id", str(recipe.id))
                    .eq("picture_links", json.dumps(links))
                    .execute()
                )
            except _STORAGE_ERRORS as error:
                logger.error("Error during %s of recipe %s: %s", operation, recipe.id, error)
                raise RecipeRepositoryError(operation, str(error)) from error

            if result.data:
                logger.info("Recipe %s: id=%s", operation, recipe.id)
                return True
            logger.debug("picture_links of %s changed concurrently, retrying", recipe.id)
            recipe = self.get(recipe.id)
            if not recipe.is_found:
                return False
        raise RecipeRepositoryError(operation, "picture_links kept changing concurrently")

    def _update_row(self, recipe_id: RecipeID, data: dict[str, Any], operation: str) -> bool:
        try:
            result = self._table().update(data).eq("id", str(recipe_id)).execute()
        except _STORAGE_ERRORS as error:
            logger.error("Error during %s of recipe %s: %s", operation, recipe_id, error)
            raise RecipeRepositoryError(operation, str(error)) from error

        if result.data:
            logger.info("Recipe %s: id=%s", operation, recipe_id)
            return True
        return False
