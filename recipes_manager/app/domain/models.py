# recipes_manager/app/domain/models.py
"""
Domain models for the recipe collection.
These are immutable value objects with no infrastructure dependencies.
"""
from __future__ import annotations

import base64
from dataclasses import dataclass, field, replace
from typing import Iterable

from recipes_manager.app.domain.errors import InvalidRecipeError
from recipes_manager.app.domain.ids import RecipeID


@dataclass(frozen=True)
class Ingredient:
    """A quantity of a named substance. The unit is a free-form label."""
    name: str
    amount: float
    unit: str = ""

    def __post_init__(self) -> None:
        amount = float(self.amount)
        if amount < 0:
            raise InvalidRecipeError(
                f"Ingredient amount must be non-negative: {self.name}={amount}"
            )
        object.__setattr__(self, "amount", amount)


@dataclass(frozen=True)
class Recipe:
    """
    A dish with its ingredients denominated for `servings` portions.
    Ingredient and picture order is preserved as given.
    """
    id: RecipeID
    name: str
    description: str = ""
    servings: int = 1
    ingredients: tuple[Ingredient, ...] = field(default_factory=tuple)
    picture_links: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.servings, int) or self.servings <= 0:
            raise InvalidRecipeError(
                f"Servings must be a positive integer, got {self.servings!r}"
            )
        object.__setattr__(self, "ingredients", tuple(self.ingredients))
        object.__setattr__(self, "picture_links", tuple(self.picture_links))

    @classmethod
    def not_found(cls) -> Recipe:
        return cls(id=RecipeID.invalid(), name="")

    @property
    def is_found(self) -> bool:
        return self.id.is_valid

    def with_id(self, recipe_id: RecipeID) -> Recipe:
        return replace(self, id=recipe_id)

    def with_picture_links(self, links: Iterable[str]) -> Recipe:
        return replace(self, picture_links=tuple(links))


@dataclass(frozen=True)
class RecipePicture:
    """A named picture of a recipe, keyed by (id, name)."""
    id: RecipeID
    name: str
    picture: str = ""

    @classmethod
    def not_found(cls, name: str = "") -> RecipePicture:
        return cls(id=RecipeID.invalid(), name=name)

    @classmethod
    def from_bytes(cls, recipe_id: RecipeID, name: str, data: bytes) -> RecipePicture:
        return cls(id=recipe_id, name=name, picture=base64.b64encode(data).decode("ascii"))

    @property
    def is_found(self) -> bool:
        return self.id.is_valid


@dataclass(frozen=True)
class RecipeList:
    recipes: tuple[RecipeID, ...] = field(default_factory=tuple)

    def as_strings(self) -> list[str]:
        return [str(recipe_id) for recipe_id in self.recipes]
