"""Integration tests for the PAB client — HTTP handling and response hooks."""
from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from pab_playground.config import PabConfig
from pab_playground.exceptions import PabRequestError, StateDecodeError
from pab_playground.models import ContractInstance, ResponseInfo
from pab_playground.pab.client import PabClient

BASE = "http://pab.example.com:9080"


@pytest.fixture()
def client(sample_pab_config: PabConfig) -> PabClient:
    return PabClient(sample_pab_config)


def _response(status: int = 200, data: object = None, text: str | None = None) -> AsyncMock:
    mock_response = AsyncMock()
    mock_response.status = status
    body = text if text is not None else ("" if data is None else json.dumps(data))
    mock_response.text = AsyncMock(return_value=body)
    mock_response.__aenter__ = AsyncMock(return_value=mock_response)
    mock_response.__aexit__ = AsyncMock(return_value=None)
    return mock_response


def _mock_session(*responses: AsyncMock, error: Exception | None = None) -> AsyncMock:
    """Create a mock aiohttp session answering requests with ``responses`` in order."""
    mock_session = AsyncMock()
    if error:
        mock_session.request = MagicMock(side_effect=error)
    else:
        mock_session.request = MagicMock(side_effect=list(responses))
    mock_session.__aenter__ = AsyncMock(return_value=mock_session)
    mock_session.__aexit__ = AsyncMock(return_value=None)
    return mock_session


def _patched(session: AsyncMock):
    return (
        patch("pab_playground.pab.client.aiohttp.ClientSession", return_value=session),
        patch("pab_playground.pab.client.aiohttp.TCPConnector"),
    )


class TestCheckPabExists:
    @pytest.mark.asyncio
    async def test_healthy(self, client: PabClient) -> None:
        session = _mock_session(_response(200, text=""))
        p1, p2 = _patched(session)
        with p1, p2:
            assert await client.check_pab_exists() is True

        args = session.request.call_args.args
        assert args == ("GET", f"{BASE}/api/healthcheck")

    @pytest.mark.asyncio
    async def test_connection_error(self, client: PabClient) -> None:
        session = _mock_session(error=ConnectionError("refused"))
        p1, p2 = _patched(session)
        with p1, p2:
            assert await client.check_pab_exists() is False

    @pytest.mark.asyncio
    async def test_error_status(self, client: PabClient) -> None:
        session = _mock_session(_response(503, text="unavailable"))
        p1, p2 = _patched(session)
        with p1, p2:
            assert await client.check_pab_exists() is False


class TestGetContracts:
    @pytest.mark.asyncio
    async def test_parses_instances(self, client: PabClient) -> None:
        data = [
            {"cicWallet": {"getWalletId": 1}, "cicContract": {"unContractInstanceId": "aaa"}},
            {"cicWallet": {"getWalletId": "2"}, "cicContract": {"unContractInstanceId": "bbb"}},
        ]
        session = _mock_session(_response(200, data))
        p1, p2 = _patched(session)
        with p1, p2:
            contracts = await client.get_contracts()

        assert contracts == [ContractInstance("1", "aaa"), ContractInstance("2", "bbb")]

    @pytest.mark.asyncio
    async def test_malformed_instance(self, client: PabClient) -> None:
        session = _mock_session(_response(200, [{"cicWallet": {}}]))
        p1, p2 = _patched(session)
        with p1, p2:
            with pytest.raises(StateDecodeError, match="Malformed"):
                await client.get_contracts()

    @pytest.mark.asyncio
    async def test_not_a_list(self, client: PabClient) -> None:
        session = _mock_session(_response(200, {"error": "x"}))
        p1, p2 = _patched(session)
        with p1, p2:
            with pytest.raises(StateDecodeError):
                await client.get_contracts()


class TestCallEndpoint:
    @pytest.mark.asyncio
    async def test_posts_then_reads_status(self, client: PabClient) -> None:
        state = {"observableState": {"Right": {"contents": []}}}
        session = _mock_session(
            _response(200, text=""),
            _response(200, {"cicCurrentState": state, "cicContractState": {}}),
        )
        p1, p2 = _patched(session)
        with p1, p2:
            result = await client.call_endpoint("abc", "pools", [])

        assert result == state
        post, get = session.request.call_args_list
        assert post.args == ("POST", f"{BASE}/api/contract/instance/abc/endpoint/pools")
        assert post.kwargs["data"] == "[]"
        assert get.args == ("GET", f"{BASE}/api/contract/instance/abc/status")

    @pytest.mark.asyncio
    async def test_waits_for_status_delay(self) -> None:
        client = PabClient(PabConfig(base_url=BASE, timeout=5, status_delay=0.25))
        session = _mock_session(
            _response(200, text=""),
            _response(200, {"cicCurrentState": {}}),
        )
        p1, p2 = _patched(session)
        with p1, p2, patch(
            "pab_playground.pab.client.asyncio.sleep", new=AsyncMock()
        ) as sleep:
            await client.call_endpoint("abc", "funds", [])

        sleep.assert_awaited_once_with(0.25)

    @pytest.mark.asyncio
    async def test_error_status_raises(self, client: PabClient) -> None:
        session = _mock_session(_response(500, text="contract crashed"))
        p1, p2 = _patched(session)
        with p1, p2:
            with pytest.raises(PabRequestError) as exc_info:
                await client.call_endpoint("abc", "swap", {"x": 1})

        assert exc_info.value.status == 500
        assert exc_info.value.body == "contract crashed"
        assert session.request.call_count == 1

    @pytest.mark.asyncio
    async def test_missing_current_state(self, client: PabClient) -> None:
        session = _mock_session(_response(200, text=""), _response(200, {}))
        p1, p2 = _patched(session)
        with p1, p2:
            with pytest.raises(StateDecodeError, match="current state"):
                await client.call_endpoint("abc", "funds", [])


class TestResponseHooks:
    @pytest.mark.asyncio
    async def test_success_hook_sees_request(self, client: PabClient) -> None:
        seen: list[ResponseInfo] = []
        client.add_response_hook(seen.append, MagicMock())
        session = _mock_session(
            _response(200, text=""),
            _response(200, {"cicCurrentState": {}}),
        )
        p1, p2 = _patched(session)
        with p1, p2:
            await client.call_endpoint("abc", "swap", {"x": 1})

        assert [(i.method, i.status) for i in seen] == [("POST", 200), ("GET", 200)]
        assert seen[0].request_body == '{"x": 1}'
        assert seen[1].request_body is None

    @pytest.mark.asyncio
    async def test_failure_hook_does_not_swallow_error(self, client: PabClient) -> None:
        on_success = MagicMock()
        on_failure = MagicMock()
        client.add_response_hook(on_success, on_failure)
        session = _mock_session(_response(404, text="no such instance"))
        p1, p2 = _patched(session)
        with p1, p2:
            with pytest.raises(PabRequestError):
                await client.call_endpoint("abc", "funds", [])

        on_success.assert_not_called()
        info = on_failure.call_args.args[0]
        assert info.status == 404
        assert info.body == "no such instance"

    @pytest.mark.asyncio
    async def test_raising_hook_does_not_change_result(self, client: PabClient) -> None:
        client.add_response_hook(MagicMock(side_effect=RuntimeError("bad hook")), MagicMock())
        session = _mock_session(_response(200, [{"cicWallet": {"getWalletId": 1},
                                                 "cicContract": {"unContractInstanceId": "a"}}]))
        p1, p2 = _patched(session)
        with p1, p2:
            contracts = await client.get_contracts()

        assert contracts == [ContractInstance("1", "a")]


class TestNonJsonBodies:
    @pytest.mark.asyncio
    async def test_healthcheck_ignores_plain_text_body(self, client: PabClient) -> None:
        session = _mock_session(_response(200, text="OK"))
        p1, p2 = _patched(session)
        with p1, p2:
            assert await client.check_pab_exists() is True

    @pytest.mark.asyncio
    async def test_endpoint_post_ignores_plain_text_body(self, client: PabClient) -> None:
        session = _mock_session(
            _response(200, text="accepted"),
            _response(200, {"cicCurrentState": {"observableState": None}}),
        )
        p1, p2 = _patched(session)
        with p1, p2:
            assert await client.call_endpoint("abc", "funds", []) == {"observableState": None}

    @pytest.mark.asyncio
    async def test_non_json_listing_raises_decode_error(self, client: PabClient) -> None:
        session = _mock_session(_response(200, text="<html>proxy</html>"))
        p1, p2 = _patched(session)
        with p1, p2:
            with pytest.raises(StateDecodeError, match="not JSON"):
                await client.get_contracts()
