"""Base model for invitation entities."""

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Immutable base for entities and directory representations.

    Records are rebuilt from directory state on every read, so they are
    never mutated in place; use ``model_copy(update=...)`` to derive one.
    """

    model_config = ConfigDict(frozen=True)
