"""Base classes for dependency injection providers."""

from typing import ClassVar, Literal

from dishka import Provider

# Remote collaborators that tests swap for in-memory doubles
Component = Literal["keycloak", "tenant"]


class ProviderBase(Provider):
    """Base for all DI providers with unified metadata.

    Attributes:
        __mock_component__: Component name (for mockable components, None for concrete providers)
        __is_mock__: Whether this is a mock implementation
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False

    @classmethod
    def is_mockable(cls) -> bool:
        """Whether this is a component base with swappable implementations."""
        return cls.__mock_component__ is not None and bool(cls.__subclasses__())
