# recipes_manager/app/services/seed.py
"""
Initial data loading.
Reads a JSON array of recipes (wire format) and adds them to a repository.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from recipes_manager.app.domain.errors import InvalidRecipeError
from recipes_manager.app.domain.models import Recipe
from recipes_manager.app.infra.db.base import RecipeRepository
from recipes_manager.app.schemas.recipes import RecipeSchema

logger = logging.getLogger(__name__)


def load_seed_file(path: str | Path) -> list[Recipe]:
    """
    Load recipes from a JSON file.

    Args:
        path: Path to a JSON file holding a list of recipe objects

    Returns:
        Recipes that could be parsed; a missing file yields an empty list
    """
    p = Path(path)
    if not p.exists():
        logger.warning("Seed file not found: %s", p)
        return []

    with p.open("r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"Seed file must contain a JSON array: {p}")

    recipes: list[Recipe] = []
    for index, item in enumerate(data):
        try:
            recipes.append(RecipeSchema.model_validate(item).to_domain())
        except (ValidationError, InvalidRecipeError) as exc:
            logger.warning("Skipping seed entry %d: %s", index, exc)
    return recipes


def seed_repository(repository: RecipeRepository, recipes: list[Recipe]) -> int:
    for recipe in recipes:
        repository.add(recipe)
    logger.info("Seeded %d recipe(s)", len(recipes))
    return len(recipes)
