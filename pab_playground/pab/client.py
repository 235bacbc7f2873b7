"""Plutus Application Backend HTTP client."""
from __future__ import annotations

import asyncio
import json
import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ..config import PabConfig
from ..exceptions import PabRequestError, StateDecodeError
from ..interfaces.transport import FailureHook, SuccessHook
from ..models import ContractInstance, ResponseInfo

logger = logging.getLogger(__name__)


class PabClient:
    """PAB REST client with response hooks for request logging."""

    def __init__(self, config: PabConfig) -> None:
        self.base_url = config.base_url.rstrip("/")
        self.timeout = config.timeout
        self.status_delay = config.status_delay
        self._hooks: list[tuple[SuccessHook, FailureHook]] = []

    def add_response_hook(self, on_success: SuccessHook, on_failure: FailureHook) -> None:
        """Register callbacks observing every response (they cannot alter it)."""
        self._hooks.append((on_success, on_failure))

    def _notify(self, info: ResponseInfo, failed: bool) -> None:
        for on_success, on_failure in self._hooks:
            hook = on_failure if failed else on_success
            try:
                hook(info)
            except Exception as e:
                logger.error("Response hook failed for %s %s: %s", info.method, info.url, e)

    async def _request(
        self, method: str, path: str, body: Any = None, parse: bool = True
    ) -> Any:
        """Send one request, run the hooks and return the decoded JSON body.

        With ``parse=False`` the body is not decoded and None is returned.
        """
        url = f"{self.base_url}{path}"
        request_body = json.dumps(body) if body is not None else None

        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        async with aiohttp.ClientSession(connector=connector) as session:
            async with session.request(
                method,
                url,
                data=request_body,
                headers={"Content-Type": "application/json"} if request_body else None,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                text = await response.text()
                info = ResponseInfo(
                    method=method,
                    url=url,
                    request_body=request_body,
                    status=response.status,
                    body=text,
                )
                if response.status >= 400:
                    self._notify(info, failed=True)
                    raise PabRequestError(response.status, method, url, text)

                self._notify(info, failed=False)
                logger.debug("%s %s -> %s", method, url, response.status)
                if not parse or not text:
                    return None
                try:
                    return json.loads(text)
                except ValueError as e:
                    raise StateDecodeError(
                        f"{method} {url}: response is not JSON: {text[:200]!r}"
                    ) from e

    async def check_pab_exists(self) -> bool:
        """Return whether the PAB answers its healthcheck."""
        try:
            await self._request("GET", "/api/healthcheck", parse=False)
            return True
        except Exception as e:
            logger.warning("PAB healthcheck at %s failed: %s", self.base_url, e)
            return False

    async def get_contracts(self) -> list[ContractInstance]:
        """List the running contract instances with their wallets."""
        result = await self._request("GET", "/api/contract/instances")
        if not isinstance(result, list):
            raise StateDecodeError(f"Contract instances: expected list, got {result!r}")

        contracts: list[ContractInstance] = []
        for item in result:
            try:
                wallet = item["cicWallet"]["getWalletId"]
                instance_id = item["cicContract"]["unContractInstanceId"]
            except (KeyError, TypeError) as e:
                raise StateDecodeError(f"Malformed contract instance {item!r}") from e
            contracts.append(ContractInstance(str(wallet), str(instance_id)))

        logger.info("Found %d contract instances", len(contracts))
        return contracts

    async def call_endpoint(self, contract_id: str, endpoint: str, body: Any) -> dict[str, Any]:
        """Call a contract endpoint and return the instance's state afterwards."""
        instance_path = f"/api/contract/instance/{contract_id}"
        await self._request(
            "POST", f"{instance_path}/endpoint/{endpoint}", body, parse=False
        )

        # the contract publishes its new observable state asynchronously
        if self.status_delay:
            await asyncio.sleep(self.status_delay)

        status = await self._request("GET", f"{instance_path}/status")
        if not isinstance(status, dict) or "cicCurrentState" not in status:
            raise StateDecodeError(f"Instance {contract_id} status has no current state")
        return status["cicCurrentState"]
