# recipes_manager/app/routers/recipes.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from recipes_manager.app.deps import get_repository
from recipes_manager.app.domain.ids import RecipeID
from recipes_manager.app.domain.models import Recipe, RecipeList
from recipes_manager.app.domain.scaling import parse_servings, scale_to
from recipes_manager.app.infra.db.base import RecipeQuery, RecipeRepository
from recipes_manager.app.schemas.recipes import (
    PictureUpload,
    RecipeCreated,
    RecipeListSchema,
    RecipePictureSchema,
    RecipeSchema,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recipes", tags=["Recipes"])


def _scaled_or_404(recipe: Recipe, servings: Optional[str], message: str) -> RecipeSchema:
    recipe = scale_to(recipe, parse_servings(servings))
    if not recipe.is_found:
        raise HTTPException(status_code=404, detail=message)
    return RecipeSchema.from_domain(recipe)


@router.get("", response_model=RecipeListSchema)
def list_recipes(
    name: Optional[str] = Query(None, description="Search for a specific name"),
    description: Optional[str] = Query(None, description="Search for a specific term in a description"),
    ingredient: Optional[str] = Query(None, description="Search for a specific ingredient"),
    repo: RecipeRepository = Depends(get_repository),
) -> RecipeListSchema:
    query = RecipeQuery(name=name, description=description, ingredient=ingredient)
    ids = repo.ids(query)
    logger.debug("Listing recipes: query=%s, matches=%d", query, len(ids))
    return RecipeListSchema.from_domain(RecipeList(tuple(ids)))


@router.post("", response_model=RecipeCreated, status_code=status.HTTP_201_CREATED)
def add_recipe(
    payload: RecipeSchema,
    repo: RecipeRepository = Depends(get_repository),
) -> RecipeCreated:
    recipe_id = repo.add(payload.to_domain())
    return RecipeCreated(id=str(recipe_id))


@router.get("/num", response_model=int)
def number_of_recipes(repo: RecipeRepository = Depends(get_repository)) -> int:
    num = repo.num()
    logger.debug("Number of recipes %d", num)
    return num


@router.get("/rand", response_model=RecipeSchema)
def random_recipe(
    servings: Optional[str] = Query(None, description="Number of servings"),
    repo: RecipeRepository = Depends(get_repository),
) -> RecipeSchema:
    return _scaled_or_404(repo.random(), servings, "No such recipe")


@router.get("/r/{recipe}", response_model=RecipeSchema)
def get_recipe(
    recipe: str,
    servings: Optional[str] = Query(None, description="Number of servings"),
    repo: RecipeRepository = Depends(get_repository),
) -> RecipeSchema:
    found = repo.get(RecipeID.parse(recipe))
    return _scaled_or_404(found, servings, f"No such recipe: {recipe}")


@router.put("/r/{recipe}", response_model=RecipeSchema)
def update_recipe(
    recipe: str,
    payload: RecipeSchema,
    repo: RecipeRepository = Depends(get_repository),
) -> RecipeSchema:
    recipe_id = RecipeID.parse(recipe)
    updated = payload.to_domain()
    if not repo.update(recipe_id, updated):
        raise HTTPException(status_code=404, detail=f"No such recipe: {recipe}")
    return RecipeSchema.from_domain(updated.with_id(recipe_id))


@router.delete("/r/{recipe}")
def delete_recipe(
    recipe: str,
    repo: RecipeRepository = Depends(get_repository),
) -> dict:
    if not repo.delete(RecipeID.parse(recipe)):
        raise HTTPException(status_code=404, detail=f"No such recipe: {recipe}")
    return {"deleted": True}


@router.get("/r/{recipe}/pictures/{name}", response_model=RecipePictureSchema)
def get_recipe_picture(
    recipe: str,
    name: str,
    repo: RecipeRepository = Depends(get_repository),
) -> RecipePictureSchema:
    picture = repo.picture(RecipeID.parse(recipe), name)
    if not picture.is_found:
        raise HTTPException(status_code=404, detail="No such picture")
    return RecipePictureSchema.from_domain(picture)


@router.put("/r/{recipe}/pictures/{name}", response_model=RecipePictureSchema)
def put_recipe_picture(
    recipe: str,
    name: str,
    payload: PictureUpload,
    repo: RecipeRepository = Depends(get_repository),
) -> RecipePictureSchema:
    recipe_id = RecipeID.parse(recipe)
    if not repo.add_picture(recipe_id, name, payload.picture):
        raise HTTPException(status_code=404, detail=f"No such recipe: {recipe}")
    return RecipePictureSchema.from_domain(repo.picture(recipe_id, name))


@router.delete("/r/{recipe}/pictures/{name}")
def delete_recipe_picture(
    recipe: str,
    name: str,
    repo: RecipeRepository = Depends(get_repository),
) -> dict:
    if not repo.remove_picture(RecipeID.parse(recipe), name):
        raise HTTPException(status_code=404, detail="No such picture")
    return {"deleted": True}
