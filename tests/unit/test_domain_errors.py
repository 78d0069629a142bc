from __future__ import annotations

from recipes_manager.app.domain.errors import (
    ConfigurationError,
    InvalidRecipeError,
    PictureStorageError,
    RecipeRepositoryError,
    RecipesError,
)


class TestRecipesError:
    def test_base_exception(self) -> None:
        error = RecipesError("Base error")
        assert str(error) == "Base error"
        assert isinstance(error, Exception)


class TestInvalidRecipeError:
    def test_default_message(self) -> None:
        assert str(InvalidRecipeError()) == "Invalid recipe"

    def test_custom_message(self) -> None:
        error = InvalidRecipeError("Servings must be positive")
        assert str(error) == "Servings must be positive"


class TestRecipeRepositoryError:
    def test_includes_operation_and_reason(self) -> None:
        error = RecipeRepositoryError("add", "Connection refused")
        assert "add" in str(error)
        assert "Connection refused" in str(error)
        assert error.operation == "add"
        assert error.reason == "Connection refused"


class TestPictureStorageError:
    def test_includes_object_key_and_reason(self) -> None:
        error = PictureStorageError("recipes/abc/pictures/top.png", "Access denied")
        assert "recipes/abc/pictures/top.png" in str(error)
        assert "Access denied" in str(error)
        assert error.object_key == "recipes/abc/pictures/top.png"
        assert error.reason == "Access denied"


class TestConfigurationError:
    def test_includes_all_errors(self) -> None:
        errors = ["SUPABASE_URL is required", "R2_BUCKET_NAME is required"]
        error = ConfigurationError(errors)
        assert "SUPABASE_URL is required" in str(error)
        assert "R2_BUCKET_NAME is required" in str(error)
        assert error.errors == errors


class TestExceptionHierarchy:
    def test_all_errors_inherit_from_recipes_error(self) -> None:
        assert issubclass(InvalidRecipeError, RecipesError)
        assert issubclass(RecipeRepositoryError, RecipesError)
        assert issubclass(PictureStorageError, RecipesError)
        assert issubclass(ConfigurationError, RecipesError)
