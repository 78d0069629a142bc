# recipes_manager/app/domain/ids.py
from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID, uuid4

# Nil UUID; uuid4() never produces it, so no stored recipe can carry it.
_INVALID = "00000000-0000-0000-0000-000000000000"


@dataclass(frozen=True)
class RecipeID:
    """String-backed recipe identifier with a single invalid sentinel."""
    value: str

    @classmethod
    def parse(cls, raw: str | None) -> RecipeID:
        """Total conversion from a raw string; unrecognized input is invalid."""
        if not raw:
            return cls.invalid()
        try:
            return cls(str(UUID(raw.strip())))
        except (ValueError, AttributeError, TypeError):
            return cls.invalid()

    @classmethod
    def invalid(cls) -> RecipeID:
        return cls(_INVALID)

    @classmethod
    def new(cls) -> RecipeID:
        return cls(str(uuid4()))

    @property
    def is_valid(self) -> bool:
        return self.value != _INVALID

    def __str__(self) -> str:
        return self.value
