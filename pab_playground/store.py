"""Store orchestrating wallets, assets, actions and the activity log."""
from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Any, Callable, Iterable, Mapping

from .activity import install_request_logging
from .config import DEFAULT_BASKET_TOKENS, AppConfig
from .decoder import ASSET_KINDS, AssetKind, decode_assets, find_basket_symbol
from .exceptions import InitializationError
from .interfaces.encoder import ActionEncoder
from .interfaces.transport import PabTransport
from .models import Asset, Loadings, LogEntry, LogType
from .pab import PabClient, encode_action_body
from .registry import ContractRegistry

logger = logging.getLogger(__name__)

PAB_MISSING_ERROR = "PAB does not exist"
INIT_ERROR = "Initialization error"

Subscriber = Callable[[str, Any], None]


def _error_text(error: Exception) -> str:
    return getattr(error, "message", None) or str(error)


class Store:
    """Observable state for the playground UI.

    UI code reads the public fields and changes them only through
    :meth:`init_project`, :meth:`switch_wallet` and :meth:`call_action`.
    None of these raise: failures end up in :attr:`logs`,
    :attr:`loadings` and :attr:`global_error`.
    """

    def __init__(
        self,
        transport: PabTransport,
        encode_body: ActionEncoder = encode_action_body,
        basket_tokens: Iterable[str] = DEFAULT_BASKET_TOKENS,
    ) -> None:
        self._transport = transport
        self._encode_body = encode_body
        self._basket_tokens = tuple(basket_tokens)
        self._registry = ContractRegistry()
        self._subscribers: list[Subscriber] = []
        self._tasks: set[asyncio.Task[None]] = set()
        self._request_logging = False

        self.symbol: str | None = None
        self.loadings = Loadings()
        self.global_error: str | None = None
        self.wallets: list[str] = []
        self.current_wallet = ""
        self.funds: list[Asset] = []
        self.pools: list[Asset] = []
        self.logs: list[LogEntry] = []

    @classmethod
    def from_config(cls, config: AppConfig) -> Store:
        return cls(PabClient(config.pab), basket_tokens=config.store.basket_tokens)

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call ``callback(field, value)`` after every field change.

        Returns a function removing the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _set(self, name: str, value: Any) -> None:
        setattr(self, name, value)
        for callback in list(self._subscribers):
            try:
                callback(name, value)
            except Exception as e:
                logger.error("Subscriber failed on %s change: %s", name, e)

    # ------------------------------------------------------------------
    # Field setters
    # ------------------------------------------------------------------

    def set_global_error(self, error_text: str) -> None:
        self._set("global_error", error_text)

    def set_loading(self, module: str, is_loading: bool) -> None:
        self._set("loadings", dataclasses.replace(self.loadings, **{module: is_loading}))

    def set_loading_all(self, is_loading: bool) -> None:
        self._set("loadings", Loadings(actions=is_loading, assets=is_loading))

    def set_current_wallet(self, wallet_id: str) -> None:
        self._set("current_wallet", wallet_id)

    def add_log(self, entry: LogEntry) -> None:
        self._set("logs", [*self.logs, entry])

    def create_log(self, log_type: LogType, message: str) -> None:
        self.add_log(LogEntry(type=log_type, message=message))

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def init_project(self) -> None:
        """Find wallets and the basket symbol, then load funds and pools."""
        if not await self._transport.check_pab_exists():
            logger.error("PAB is not reachable, giving up initialization")
            self.set_global_error(PAB_MISSING_ERROR)
            self.set_loading_all(False)
            return

        if not self._request_logging:
            install_request_logging(self._transport, self.add_log)
            self._request_logging = True

        try:
            contracts = await self._transport.get_contracts()
            self._registry = ContractRegistry.from_instances(contracts)
            self._set("wallets", list(self._registry.wallets))
            if self.wallets:
                self.set_current_wallet(self.wallets[0])
            logger.info("Registered %d wallets", len(self.wallets))

            contract_id = self._registry.contract_for(self.current_wallet)
            state = await self._transport.call_endpoint(contract_id, "funds", [])
            symbol = find_basket_symbol(state, self._basket_tokens)
            if not symbol:
                raise InitializationError(f"SYMBOL: {symbol}")
            self.create_log(LogType.SUCCESS, f"SYMBOL: {symbol}")
            self.symbol = symbol

            await self.fetch_assets("funds")
            await self.fetch_assets("pools")
        except Exception as e:
            logger.exception("Initialization failed")
            self.set_global_error(INIT_ERROR)
            self.create_log(LogType.ERROR, f"{INIT_ERROR}\n\n{_error_text(e)}")
            self.set_loading_all(False)

    def switch_wallet(self, wallet_id: str) -> asyncio.Task[None] | None:
        """Make ``wallet_id`` current and refresh its funds in the background.

        Pools are left as they are. Without a running event loop nothing
        changes, an ERROR entry is logged and None is returned.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            logger.error("Cannot switch to wallet %s: %s", wallet_id, e)
            self.create_log(LogType.ERROR, f'Switch wallet: "{wallet_id}"\n\n{e}')
            return None

        self.set_current_wallet(wallet_id)
        task = loop.create_task(self.fetch_assets("funds"))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def call_action(self, action_name: str, params: Mapping[str, Any]) -> None:
        """Run a contract endpoint for the current wallet, then reload assets."""
        self.set_loading_all(True)

        try:
            body = self._encode_body(action_name, params, self.symbol)
            contract_id = self._registry.contract_for(self.current_wallet)
            await self._transport.call_endpoint(contract_id, action_name, body)
            self.create_log(LogType.SUCCESS, f'Action "{action_name}"')
            self.set_loading("actions", False)

            await self.fetch_assets("funds")
            await self.fetch_assets("pools")
        except Exception as e:
            logger.error("Action %s failed: %s", action_name, e)
            self.create_log(
                LogType.ERROR, f'Action request: "{action_name}"\n\n{_error_text(e)}'
            )
            self.set_loading_all(False)

    async def fetch_assets(self, kind: AssetKind) -> None:
        """Replace ``funds`` or ``pools`` with the current wallet's state.

        On failure the old collection stays in place.
        """
        self.set_loading("assets", True)

        try:
            if kind not in ASSET_KINDS:
                raise ValueError(f"Unknown asset kind: {kind!r}")
            contract_id = self._registry.contract_for(self.current_wallet)
            state = await self._transport.call_endpoint(contract_id, kind, [])
            assets = decode_assets(kind, state)
            self._set(kind, assets)
            self.create_log(LogType.SUCCESS, f'Assets request: "{kind}"')
        except Exception as e:
            logger.error("Assets request %s failed: %s", kind, e)
            self.create_log(LogType.ERROR, f'Assets request: "{kind}"\n\n{_error_text(e)}')
        finally:
            self.set_loading("assets", False)
