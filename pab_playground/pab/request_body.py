"""Request bodies for the uniswap contract endpoints — no I/O."""
from __future__ import annotations

from typing import Any, Mapping

from ..exceptions import ActionEncodingError

# action -> (field prefix, coin fields, amount fields as (param, suffix))
_LAYOUTS: dict[str, tuple[str, tuple[str, ...], tuple[tuple[str, str], ...]]] = {
    "create": ("cp", ("coinA", "coinB"), (("amountA", "AmountA"), ("amountB", "AmountB"))),
    "add": ("ap", ("coinA", "coinB"), (("amountA", "AmountA"), ("amountB", "AmountB"))),
    "swap": ("sp", ("coinA", "coinB"), (("amountA", "AmountA"), ("amountB", "AmountB"))),
    "remove": ("rp", ("coinA", "coinB"), (("diff", "Diff"),)),
    "close": ("clp", ("coinA", "coinB"), ()),
}

ACTIONS: tuple[str, ...] = tuple(_LAYOUTS)


def encode_coin(symbol: str, token_name: str) -> dict[str, Any]:
    """Encode an asset class as the PAB expects it."""
    return {"unAssetClass": [{"unCurrencySymbol": symbol}, {"unTokenName": token_name}]}


def encode_amount(value: Any, param: str) -> dict[str, int]:
    try:
        amount = int(value)
    except (TypeError, ValueError):
        raise ActionEncodingError(f"Parameter '{param}' must be an integer, got {value!r}") from None
    if amount < 0:
        raise ActionEncodingError(f"Parameter '{param}' must not be negative, got {amount}")
    return {"unAmount": amount}


def encode_action_body(
    action_name: str, params: Mapping[str, Any], symbol: str | None
) -> dict[str, Any]:
    """Build the endpoint body for a uniswap action.

    ``params`` holds token names under ``coinA``/``coinB`` and integer
    amounts under ``amountA``/``amountB`` (or ``diff`` for ``remove``).
    Coins are qualified with ``symbol``, the currency symbol of the
    playground's token basket.
    """
    layout = _LAYOUTS.get(action_name)
    if layout is None:
        raise ActionEncodingError(f"Unknown action: {action_name!r}")
    if not symbol:
        raise ActionEncodingError(f"Currency symbol is not resolved for action {action_name!r}")

    prefix, coin_params, amount_params = layout
    body: dict[str, Any] = {}

    for param in coin_params:
        if param not in params:
            raise ActionEncodingError(f"Action {action_name!r} requires parameter '{param}'")
        body[f"{prefix}{param[0].upper()}{param[1:]}"] = encode_coin(symbol, str(params[param]))

    for param, suffix in amount_params:
        if param not in params:
            raise ActionEncodingError(f"Action {action_name!r} requires parameter '{param}'")
        body[f"{prefix}{suffix}"] = encode_amount(params[param], param)

    return body
