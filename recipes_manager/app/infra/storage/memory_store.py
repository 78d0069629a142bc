# recipes_manager/app/infra/storage/memory_store.py
from __future__ import annotations

import logging
import threading

from recipes_manager.app.domain.ids import RecipeID
from recipes_manager.app.domain.models import RecipePicture
from recipes_manager.app.infra.storage.base import PictureStore

logger = logging.getLogger(__name__)


class InMemoryPictureStore(PictureStore):
    def __init__(self) -> None:
        self._pictures: dict[tuple[RecipeID, str], RecipePicture] = {}
        self._lock = threading.Lock()

    def get(self, recipe_id: RecipeID, name: str) -> RecipePicture:
        with self._lock:
            picture = self._pictures.get((recipe_id, name))
        if picture is None:
            logger.debug("Picture not found: recipe=%s, name=%s", recipe_id, name)
            return RecipePicture.not_found(name)
        return picture

    def put(self, picture: RecipePicture) -> None:
        with self._lock:
            self._pictures[(picture.id, picture.name)] = picture
        logger.info("Stored picture: recipe=%s, name=%s", picture.id, picture.name)

    def remove(self, recipe_id: RecipeID, name: str) -> bool:
        with self._lock:
            return self._pictures.pop((recipe_id, name), None) is not None

    def remove_all(self, recipe_id: RecipeID) -> int:
        with self._lock:
            keys = [key for key in self._pictures if key[0] == recipe_id]
            for key in keys:
                del self._pictures[key]
        if keys:
            logger.info("Removed %d picture(s) of recipe %s", len(keys), recipe_id)
        return len(keys)
