"""Base class for value objects."""

from pydantic import BaseModel, ConfigDict


class ValueObject(BaseModel):
    """Immutable, compared by value.

    Group, role and channel type references are value objects: two refs to
    the same id and name are interchangeable.
    """

    model_config = ConfigDict(frozen=True)
