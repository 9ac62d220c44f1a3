"""Base use case."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

RequestT = TypeVar("RequestT", bound=BaseModel)
ResponseT = TypeVar("ResponseT", bound=BaseModel)


class BaseUseCase(ABC, Generic[RequestT, ResponseT]):
    """Base use case for orchestrating invitation workflows.

    Requests and responses are pydantic models so the facade and the API
    layer can build and serialize them directly.
    """

    @abstractmethod
    async def execute(self, request: RequestT) -> ResponseT:
        pass
