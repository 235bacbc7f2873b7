"""Action encoder protocol — builds endpoint request bodies."""
from typing import Any, Mapping, Protocol


class ActionEncoder(Protocol):
    """Callable turning an action and its params into a request body."""

    def __call__(
        self, action_name: str, params: Mapping[str, Any], symbol: str | None
    ) -> Any: ...
