"""Pure decoding functions for PAB observable states — no I/O.

The PAB wraps every contract state as::

    {"observableState": {"Right": {"contents": ...}}}

or, when the contract reported an error, ``{"Left": ...}`` instead of
``Right``. Every function here raises :class:`StateDecodeError` as soon as
the payload deviates from the expected shape.
"""
from __future__ import annotations

from typing import Any, Iterable, Literal

from .exceptions import StateDecodeError
from .models import Asset

AssetKind = Literal["funds", "pools"]
ASSET_KINDS: tuple[str, ...] = ("funds", "pools")

Basket = tuple[str, list[tuple[str, int]]]


def _field(obj: Any, key: str, where: str) -> Any:
    if not isinstance(obj, dict) or key not in obj:
        raise StateDecodeError(f"{where}: expected object with '{key}', got {obj!r}")
    return obj[key]


def _string(obj: Any, key: str, where: str) -> str:
    value = _field(obj, key, where)
    if not isinstance(value, str):
        raise StateDecodeError(f"{where}: '{key}' must be a string, got {value!r}")
    return value


def _list(value: Any, where: str) -> list[Any]:
    if not isinstance(value, list):
        raise StateDecodeError(f"{where}: expected list, got {value!r}")
    return value


def _pair(value: Any, where: str) -> tuple[Any, Any]:
    if not isinstance(value, list) or len(value) != 2:
        raise StateDecodeError(f"{where}: expected [key, value] pair, got {value!r}")
    return value[0], value[1]


def _amount(value: Any, where: str) -> int:
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise StateDecodeError(f"{where}: amount must be an integer, got {value!r}")
    return value


def observable_contents(state: Any) -> Any:
    """Unwrap ``observableState.Right.contents`` from a raw contract state."""
    observable = _field(state, "observableState", "state")
    if isinstance(observable, dict) and "Left" in observable:
        raise StateDecodeError(
            f"Contract returned an error: {observable['Left']!r}",
            {"left": observable["Left"]},
        )
    right = _field(observable, "Right", "observableState")
    return _field(right, "contents", "observableState.Right")


def decode_baskets(state: Any) -> list[Basket]:
    """Decode the "funds" state into ``(currency_symbol, [(token, amount)])`` baskets."""
    value = _field(observable_contents(state), "getValue", "funds")
    baskets: list[Basket] = []
    for i, entry in enumerate(_list(value, "funds.getValue")):
        where = f"funds[{i}]"
        symbol_wrapper, tokens = _pair(entry, where)
        symbol = _string(symbol_wrapper, "unCurrencySymbol", where)
        amounts: list[tuple[str, int]] = []
        for j, token_entry in enumerate(_list(tokens, where)):
            token_where = f"{where}[{j}]"
            token_wrapper, amount = _pair(token_entry, token_where)
            amounts.append(
                (
                    _string(token_wrapper, "unTokenName", token_where),
                    _amount(amount, token_where),
                )
            )
        baskets.append((symbol, amounts))
    return baskets


def decode_funds(state: Any) -> list[Asset]:
    """Flatten funds baskets into one Asset per token, keeping basket order."""
    return [
        Asset(currency_symbol=symbol, token_name=token, amount=amount)
        for symbol, amounts in decode_baskets(state)
        for token, amount in amounts
    ]


def decode_pools(state: Any) -> list[Asset]:
    """Flatten pool groups into one Asset per ``[assetClass, amount]`` leaf.

    Symbol and token name come from the nested ``unAssetClass`` pair.
    """
    contents = observable_contents(state)
    assets: list[Asset] = []
    for i, group in enumerate(_list(contents, "pools")):
        for j, leaf in enumerate(_list(group, f"pools[{i}]")):
            where = f"pools[{i}][{j}]"
            asset_class, amount = _pair(leaf, where)
            symbol_wrapper, token_wrapper = _pair(
                _field(asset_class, "unAssetClass", where), f"{where}.unAssetClass"
            )
            assets.append(
                Asset(
                    currency_symbol=_string(symbol_wrapper, "unCurrencySymbol", where),
                    token_name=_string(token_wrapper, "unTokenName", where),
                    amount=_amount(amount, where),
                )
            )
    return assets


def decode_assets(kind: str, state: Any) -> list[Asset]:
    """Decode a raw state of the given collection kind."""
    if kind == "funds":
        return decode_funds(state)
    if kind == "pools":
        return decode_pools(state)
    raise ValueError(f"Unknown asset kind: {kind!r}")


def find_basket_symbol(state: Any, token_names: Iterable[str]) -> str | None:
    """Return the currency symbol of the first basket holding exactly ``token_names``."""
    wanted = set(token_names)
    for symbol, amounts in decode_baskets(state):
        if {token for token, _ in amounts} == wanted:
            return symbol
    return None
