# recipes_manager/app/deps.py (process-wide repository, exposed as a dependency)

from __future__ import annotations

import logging

from recipes_manager.app.config import Settings, settings
from recipes_manager.app.domain.errors import ConfigurationError
from recipes_manager.app.infra.db.base import RecipeRepository
from recipes_manager.app.infra.db.memory_repo import InMemoryRecipeRepository
from recipes_manager.app.infra.storage.base import PictureStore
from recipes_manager.app.infra.storage.memory_store import InMemoryPictureStore

logger = logging.getLogger(__name__)

_repository: RecipeRepository | None = None


def build_picture_store(cfg: Settings) -> PictureStore:
    if cfg.PICTURES_BACKEND == "r2":
        from recipes_manager.app.infra.storage.r2_store import R2PictureStore

        return R2PictureStore(
            account_id=cfg.R2_ACCOUNT_ID,
            access_key_id=cfg.R2_ACCESS_KEY_ID,
            secret_access_key=cfg.R2_SECRET_ACCESS_KEY,
            bucket_name=cfg.R2_BUCKET_NAME,
        )
    return InMemoryPictureStore()


def build_repository(cfg: Settings) -> RecipeRepository:
    """Construct the repository selected by `cfg`; raises ConfigurationError on gaps."""
    errors = cfg.validate_backends()
    if errors:
        raise ConfigurationError(errors)

    pictures = build_picture_store(cfg)
    if cfg.RECIPES_BACKEND == "supabase":
        from recipes_manager.app.infra.db.supabase_recipes_repo import SupabaseRecipeRepository

        return SupabaseRecipeRepository(
            pictures,
            url=str(cfg.SUPABASE_URL),
            key=cfg.SUPABASE_SERVICE_ROLE_KEY,
            table_name=cfg.SUPABASE_RECIPES_TABLE,
        )
    return InMemoryRecipeRepository(pictures)


def get_repository() -> RecipeRepository:
    global _repository
    if _repository is None:
        _repository = build_repository(settings)
        logger.info(
            "Recipe repository ready: recipes=%s, pictures=%s",
            settings.RECIPES_BACKEND,
            settings.PICTURES_BACKEND,
        )
    return _repository
