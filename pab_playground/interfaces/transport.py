"""Transport protocol — PAB HTTP API abstraction."""
from typing import Any, Callable, Protocol

from ..models import ContractInstance, ResponseInfo

SuccessHook = Callable[[ResponseInfo], None]
FailureHook = Callable[[ResponseInfo], None]


class PabTransport(Protocol):
    """Abstract interface for talking to the Plutus Application Backend."""

    async def check_pab_exists(self) -> bool: ...

    async def get_contracts(self) -> list[ContractInstance]: ...

    async def call_endpoint(
        self, contract_id: str, endpoint: str, body: Any
    ) -> dict[str, Any]: ...

    def add_response_hook(
        self, on_success: SuccessHook, on_failure: FailureHook
    ) -> None: ...
