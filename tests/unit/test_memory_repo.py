from __future__ import annotations

import random
import threading
from unittest.mock import MagicMock

import pytest

from recipes_manager.app.domain.errors import PictureStorageError
from recipes_manager.app.domain.ids import RecipeID
from recipes_manager.app.domain.models import Ingredient, Recipe
from recipes_manager.app.domain.scaling import scale_to
from recipes_manager.app.infra.db.base import RecipeQuery
from recipes_manager.app.infra.db.memory_repo import InMemoryRecipeRepository
from recipes_manager.app.infra.storage.memory_store import InMemoryPictureStore


def make_recipe(name: str, description: str = "", ingredients: tuple[str, ...] = (), servings: int = 2) -> Recipe:
    return Recipe(
        id=RecipeID.invalid(),
        name=name,
        description=description,
        servings=servings,
        ingredients=tuple(Ingredient(i, 100, "g") for i in ingredients),
    )


@pytest.fixture
def pictures() -> InMemoryPictureStore:
    return InMemoryPictureStore()


@pytest.fixture
def repo(pictures: InMemoryPictureStore) -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository(pictures, rng=random.Random(7))


class TestEmptyRepository:
    def test_num_ids_random(self, repo: InMemoryRecipeRepository) -> None:
        assert repo.num() == 0
        assert repo.ids() == []
        assert repo.random().id == RecipeID.invalid()

    def test_get_unknown_returns_sentinel(self, repo: InMemoryRecipeRepository) -> None:
        assert repo.get(RecipeID.new()).id == RecipeID.invalid()

    def test_update_and_delete_unknown(self, repo: InMemoryRecipeRepository) -> None:
        assert repo.update(RecipeID.new(), make_recipe("Ghost")) is False
        assert repo.delete(RecipeID.new()) is False
        assert repo.num() == 0


class TestAddGet:
    def test_add_then_get_round_trip(self, repo: InMemoryRecipeRepository) -> None:
        recipe = make_recipe("Tomato Soup", "hot", ("tomato", "salt"))

        recipe_id = repo.add(recipe)
        stored = repo.get(recipe_id)

        assert recipe_id.is_valid
        assert stored == recipe.with_id(recipe_id)
        assert repo.num() == 1

    def test_client_supplied_id_is_ignored(self, repo: InMemoryRecipeRepository) -> None:
        client_id = RecipeID.new()
        recipe = make_recipe("Stew").with_id(client_id)

        assigned = repo.add(recipe)

        assert assigned != client_id
        assert repo.get(client_id).is_found is False
        assert repo.get(assigned).name == "Stew"

    def test_ids_keep_insertion_order(self, repo: InMemoryRecipeRepository) -> None:
        added = [repo.add(make_recipe(f"Dish {n}")) for n in range(5)]
        assert repo.ids() == added

    def test_random_returns_member(self, repo: InMemoryRecipeRepository) -> None:
        added = {repo.add(make_recipe(f"Dish {n}")) for n in range(4)}
        for _ in range(20):
            assert repo.random().id in added


class TestUpdateDelete:
    def test_update_replaces_fully(self, repo: InMemoryRecipeRepository) -> None:
        recipe_id = repo.add(make_recipe("Old", "old text", ("a",)))

        assert repo.update(recipe_id, make_recipe("New", "", ("b", "c"), servings=6)) is True

        stored = repo.get(recipe_id)
        assert stored.id == recipe_id
        assert stored.name == "New"
        assert stored.servings == 6
        assert [i.name for i in stored.ingredients] == ["b", "c"]

    def test_delete_then_get_is_sentinel(self, repo: InMemoryRecipeRepository) -> None:
        recipe_id = repo.add(make_recipe("Short lived"))

        assert repo.delete(recipe_id) is True
        assert repo.get(recipe_id).id == RecipeID.invalid()
        assert repo.delete(recipe_id) is False

    def test_scaling_does_not_touch_stored_record(self, repo: InMemoryRecipeRepository) -> None:
        recipe_id = repo.add(make_recipe("Bread", ingredients=("flour",)))

        scale_to(repo.get(recipe_id), 10)

        stored = repo.get(recipe_id)
        assert stored.servings == 2
        assert stored.ingredients[0].amount == 100


class TestFilters:
    @pytest.fixture
    def populated(self, repo: InMemoryRecipeRepository) -> dict[str, RecipeID]:
        return {
            "tomato": repo.add(make_recipe("Tomato Soup", "A warming starter", ("tomato", "onion"))),
            "pumpkin": repo.add(make_recipe("Pumpkin soup", "Autumn classic", ("pumpkin", "cream"))),
            "salad": repo.add(make_recipe("Greek Salad", "Fresh and cold", ("tomato", "feta"))),
        }

    def test_name_filter_is_case_insensitive(self, repo, populated) -> None:
        assert repo.ids(RecipeQuery(name="Soup")) == [populated["tomato"], populated["pumpkin"]]
        assert repo.ids(RecipeQuery(name="SOUP")) == [populated["tomato"], populated["pumpkin"]]

    def test_description_filter(self, repo, populated) -> None:
        assert repo.ids(RecipeQuery(description="cold")) == [populated["salad"]]

    def test_ingredient_filter_matches_any_ingredient(self, repo, populated) -> None:
        assert repo.ids(RecipeQuery(ingredient="tomato")) == [populated["tomato"], populated["salad"]]
        assert repo.ids(RecipeQuery(ingredient="Fet")) == [populated["salad"]]

    def test_filters_combine_with_and(self, repo, populated) -> None:
        query = RecipeQuery(name="soup", ingredient="tomato")
        assert repo.ids(query) == [populated["tomato"]]

    def test_no_match_is_empty(self, repo, populated) -> None:
        assert repo.ids(RecipeQuery(name="Lasagne")) == []

    def test_empty_query_returns_everything(self, repo, populated) -> None:
        assert repo.ids(RecipeQuery()) == list(populated.values())
        assert repo.ids(RecipeQuery(name="", description="")) == list(populated.values())


class TestPictures:
    def test_add_picture_links_and_stores(self, repo, pictures) -> None:
        recipe_id = repo.add(make_recipe("Cake"))

        assert repo.add_picture(recipe_id, "top", "aGVsbG8=") is True

        assert repo.get(recipe_id).picture_links == ("top",)
        picture = repo.picture(recipe_id, "top")
        assert picture.id == recipe_id
        assert picture.picture == "aGVsbG8="

    def test_overwriting_picture_does_not_duplicate_link(self, repo) -> None:
        recipe_id = repo.add(make_recipe("Cake"))

        repo.add_picture(recipe_id, "top", "one")
        repo.add_picture(recipe_id, "top", "two")

        assert repo.get(recipe_id).picture_links == ("top",)
        assert repo.picture(recipe_id, "top").picture == "two"

    def test_picture_on_unknown_recipe(self, repo) -> None:
        assert repo.add_picture(RecipeID.new(), "top", "x") is False
        assert repo.picture(RecipeID.new(), "top").id == RecipeID.invalid()

    def test_unknown_picture_name(self, repo) -> None:
        recipe_id = repo.add(make_recipe("Cake"))
        assert repo.picture(recipe_id, "missing").is_found is False

    def test_remove_picture(self, repo) -> None:
        recipe_id = repo.add(make_recipe("Cake"))
        repo.add_picture(recipe_id, "top", "x")
        repo.add_picture(recipe_id, "side", "y")

        assert repo.remove_picture(recipe_id, "top") is True
        assert repo.remove_picture(recipe_id, "top") is False

        assert repo.get(recipe_id).picture_links == ("side",)
        assert repo.picture(recipe_id, "top").is_found is False

    def test_delete_cascades_pictures(self, repo, pictures) -> None:
        recipe_id = repo.add(make_recipe("Cake"))
        repo.add_picture(recipe_id, "top", "x")
        repo.add_picture(recipe_id, "side", "y")

        repo.delete(recipe_id)

        assert pictures.get(recipe_id, "top").is_found is False
        assert pictures.get(recipe_id, "side").is_found is False

    def test_failed_cascade_keeps_recipe(self) -> None:
        store = MagicMock(spec=InMemoryPictureStore)
        store.remove_all.side_effect = PictureStorageError("recipes/x/pictures/", "bucket offline")
        repo = InMemoryRecipeRepository(store)
        recipe_id = repo.add(make_recipe("Cake"))

        with pytest.raises(PictureStorageError):
            repo.delete(recipe_id)

        assert repo.get(recipe_id).is_found is True
        store.remove_all.side_effect = None
        assert repo.delete(recipe_id) is True
        assert repo.get(recipe_id).is_found is False


class TestConcurrency:
    def test_parallel_adds_and_reads(self, repo: InMemoryRecipeRepository) -> None:
        errors: list[Exception] = []

        def writer(n: int) -> None:
            try:
                for i in range(25):
                    repo.add(make_recipe(f"w{n}-{i}", ingredients=("salt",)))
            except Exception as exc:  # pragma: no cover - surfaced by the assert below
                errors.append(exc)

        def reader() -> None:
            try:
                for _ in range(50):
                    for recipe_id in repo.ids(RecipeQuery(ingredient="salt")):
                        repo.get(recipe_id)
                    repo.random()
            except Exception as exc:  # pragma: no cover
                errors.append(exc)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        threads += [threading.Thread(target=reader) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert repo.num() == 100
