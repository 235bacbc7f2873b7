"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from pab_playground.config import AppConfig, PabConfig, StoreConfig
from pab_playground.models import ContractInstance
from pab_playground.store import Store

SYMBOL = "abc123"


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_pab_config() -> PabConfig:
    return PabConfig(base_url="http://pab.example.com:9080", timeout=5, status_delay=0)


@pytest.fixture()
def sample_app_config(sample_pab_config: PabConfig) -> AppConfig:
    return AppConfig(pab=sample_pab_config, store=StoreConfig())


SAMPLE_YAML = textwrap.dedent("""\
    pab:
      base_url: "http://pab.example.com:9080/"
      timeout: 10
      status_delay: 0.5
    store:
      basket_tokens: [A, B, C, D]
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


# ---------------------------------------------------------------------------
# Sample PAB data
# ---------------------------------------------------------------------------


def coin(symbol: str, token: str) -> dict[str, Any]:
    return {"unAssetClass": [{"unCurrencySymbol": symbol}, {"unTokenName": token}]}


@pytest.fixture()
def sample_contracts() -> list[ContractInstance]:
    return [
        ContractInstance("1", "instance-1"),
        ContractInstance("2", "instance-2"),
        ContractInstance("3", "instance-3"),
    ]


@pytest.fixture()
def sample_funds_state() -> dict[str, Any]:
    return {
        "observableState": {
            "Right": {
                "tag": "Funds",
                "contents": {
                    "getValue": [
                        [{"unCurrencySymbol": ""}, [[{"unTokenName": ""}, 100000000]]],
                        [
                            {"unCurrencySymbol": SYMBOL},
                            [
                                [{"unTokenName": "A"}, 1000000],
                                [{"unTokenName": "B"}, 2000000],
                                [{"unTokenName": "C"}, 3000000],
                                [{"unTokenName": "D"}, 4000000],
                            ],
                        ],
                    ]
                },
            }
        }
    }


@pytest.fixture()
def sample_pools_state() -> dict[str, Any]:
    return {
        "observableState": {
            "Right": {
                "tag": "Pools",
                "contents": [
                    [[coin(SYMBOL, "A"), 1000], [coin(SYMBOL, "B"), 2000]],
                    [[coin(SYMBOL, "C"), 300], [coin(SYMBOL, "D"), 400]],
                ],
            }
        }
    }


# ---------------------------------------------------------------------------
# Store fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_transport(
    sample_contracts: list[ContractInstance],
    sample_funds_state: dict[str, Any],
    sample_pools_state: dict[str, Any],
) -> AsyncMock:
    """Transport answering "funds" and "pools" with the sample states."""
    states = {"funds": sample_funds_state, "pools": sample_pools_state}

    def call_endpoint(contract_id: str, endpoint: str, body: Any) -> dict[str, Any]:
        return states.get(endpoint, {"observableState": {"Right": {"contents": []}}})

    transport = AsyncMock()
    transport.check_pab_exists.return_value = True
    transport.get_contracts.return_value = sample_contracts
    transport.call_endpoint.side_effect = call_endpoint
    transport.add_response_hook = MagicMock()
    return transport


@pytest.fixture()
def store(mock_transport: AsyncMock) -> Store:
    return Store(mock_transport)
