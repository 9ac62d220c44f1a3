"""Base service class for domain services."""

from typing import Any, ClassVar

import logfire


class Service:
    """Base class for all domain services.

    Domain services hold invitation logic that doesn't belong to a single
    model, such as token handling, attribute encoding and provisioning.
    ``span_name`` prefixes the logfire spans a service opens.
    """

    span_name: ClassVar[str] = "service"

    def span(self, operation: str, **attributes: Any) -> logfire.LogfireSpan:
        """Open a logfire span named ``<span_name>.<operation>``."""
        return logfire.span(f"{self.span_name}.{operation}", **attributes)
