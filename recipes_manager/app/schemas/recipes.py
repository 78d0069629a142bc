# recipes_manager/app/schemas/recipes.py
from __future__ import annotations

from pydantic import AliasChoices, BaseModel, Field

from recipes_manager.app.domain.ids import RecipeID
from recipes_manager.app.domain.models import Ingredient, Recipe, RecipeList, RecipePicture


class IngredientSchema(BaseModel):
    name: str = Field(..., description="Name of the ingredient")
    amount: float = Field(default=0, ge=0, description="Amount needed in a recipe of an ingredient")
    unit: str = Field(default="", description="Unit of the amount")


class RecipeSchema(BaseModel):
    """Recipe on the wire. Older clients send `components` and `pictureLink`."""
    id: str = ""
    name: str = ""
    description: str = ""
    servings: int = Field(default=1, ge=1)
    ingredients: list[IngredientSchema] = Field(
        default_factory=list,
        validation_alias=AliasChoices("ingredients", "components"),
    )
    pictureLinks: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("pictureLinks", "pictureLink"),
    )

    def to_domain(self) -> Recipe:
        return Recipe(
            id=RecipeID.parse(self.id),
            name=self.name,
            description=self.description,
            servings=self.servings,
            ingredients=tuple(
                Ingredient(name=i.name, amount=i.amount, unit=i.unit) for i in self.ingredients
            ),
            picture_links=tuple(self.pictureLinks),
        )

    @classmethod
    def from_domain(cls, recipe: Recipe) -> RecipeSchema:
        return cls(
            id=str(recipe.id),
            name=recipe.name,
            description=recipe.description,
            servings=recipe.servings,
            ingredients=[
                IngredientSchema(name=i.name, amount=i.amount, unit=i.unit)
                for i in recipe.ingredients
            ],
            pictureLinks=list(recipe.picture_links),
        )


class RecipeListSchema(BaseModel):
    recipes: list[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, recipes: RecipeList) -> RecipeListSchema:
        return cls(recipes=recipes.as_strings())


class RecipeCreated(BaseModel):
    id: str


class RecipePictureSchema(BaseModel):
    id: str
    name: str
    picture: str

    @classmethod
    def from_domain(cls, picture: RecipePicture) -> RecipePictureSchema:
        return cls(id=str(picture.id), name=picture.name, picture=picture.picture)


class PictureUpload(BaseModel):
    picture: str = Field(..., min_length=1, description="Encoded picture content")


class VersionResponse(BaseModel):
    api: str
    app: str
