# recipes_manager/app/infra/storage/base.py
"""
Abstract base class for picture stores.
This interface allows easy swapping between storage backends (memory, R2, ...).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from urllib.parse import quote

from recipes_manager.app.domain.ids import RecipeID
from recipes_manager.app.domain.models import RecipePicture


class PictureStore(ABC):
    """
    Abstract interface for recipe pictures, keyed by (recipe id, name).

    Implementations:
    - InMemoryPictureStore: process-local dict, used by default and in tests
    - R2PictureStore: Cloudflare R2 (S3-compatible)
    """

    @abstractmethod
    def get(self, recipe_id: RecipeID, name: str) -> RecipePicture:
        """
        Fetch a picture.

        Returns:
            The picture, or RecipePicture.not_found() when it does not exist
        """
        pass

    @abstractmethod
    def put(self, picture: RecipePicture) -> None:
        """Create or overwrite the picture stored under (picture.id, picture.name)."""
        pass

    @abstractmethod
    def remove(self, recipe_id: RecipeID, name: str) -> bool:
        """
        Remove a single picture.

        Returns:
            True if a picture was removed
        """
        pass

    @abstractmethod
    def remove_all(self, recipe_id: RecipeID) -> int:
        """
        Remove every picture of a recipe.

        Returns:
            Number of pictures removed
        """
        pass

    def object_key(self, recipe_id: RecipeID, name: str) -> str:
        """
        Standardized object key for a picture.

        Format: recipes/{recipe_id}/pictures/{name}, with the name
        percent-encoded so distinct names never share a key.
        """
        return f"{self.prefix(recipe_id)}{quote(name, safe='')}"

    def prefix(self, recipe_id: RecipeID) -> str:
        return f"recipes/{recipe_id}/pictures/"
