# recipes_manager/app/domain/scaling.py
"""
Proportional ingredient scaling.

Amounts are recomputed in IEEE-754 double precision as
``amount * target / servings`` (multiply first, then divide) with no extra
rounding, so repeated rescaling is not guaranteed to be exactly invertible.
"""
from __future__ import annotations

import logging
from dataclasses import replace

from recipes_manager.app.domain.models import Recipe

logger = logging.getLogger(__name__)

NO_SCALING = -1


def scale_to(recipe: Recipe, target_servings: int) -> Recipe:
    """
    Return a copy of `recipe` denominated for `target_servings` portions.

    Non-positive targets leave the recipe untouched. The input is never
    mutated.
    """
    if target_servings <= 0 or not recipe.is_found:
        return recipe

    ingredients = tuple(
        replace(ingredient, amount=ingredient.amount * target_servings / recipe.servings)
        for ingredient in recipe.ingredients
    )
    return replace(recipe, servings=target_servings, ingredients=ingredients)


def parse_servings(raw: str | None) -> int:
    """Servings query value to int; absent or malformed means no scaling."""
    if raw is None or raw == "":
        return NO_SCALING
    try:
        return int(raw)
    except ValueError:
        logger.warning("Could not convert the amount of servings requested: %r", raw)
        return NO_SCALING
