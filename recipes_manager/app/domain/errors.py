from __future__ import annotations


class RecipesError(Exception):
    pass


class InvalidRecipeError(RecipesError):
    def __init__(self, message: str = "Invalid recipe"):
        super().__init__(message)


class RecipeRepositoryError(RecipesError):
    def __init__(self, operation: str, reason: str):
        super().__init__(f"Recipe repository error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason


class PictureStorageError(RecipesError):
    def __init__(self, object_key: str, reason: str = "Storage failure"):
        super().__init__(f"Picture storage error for {object_key}: {reason}")
        self.object_key = object_key
        self.reason = reason


class ConfigurationError(RecipesError):
    def __init__(self, errors: list[str]):
        super().__init__(f"Configuration errors: {', '.join(errors)}")
        self.errors = errors
