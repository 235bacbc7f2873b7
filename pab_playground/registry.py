"""Wallet → contract instance registry."""
from __future__ import annotations

from typing import Iterable

from .exceptions import UnknownWalletError
from .models import ContractInstance


class ContractRegistry:
    """Maps wallet ids to the contract instance running for them.

    Wallets keep the order the PAB listed them in. A wallet listed twice
    appears twice in :attr:`wallets` and resolves to its last instance.
    """

    def __init__(self) -> None:
        self._contracts: dict[str, str] = {}
        self.wallets: list[str] = []

    @classmethod
    def from_instances(cls, instances: Iterable[ContractInstance]) -> ContractRegistry:
        registry = cls()
        for instance in instances:
            registry.register(instance.wallet_id, instance.contract_instance_id)
        return registry

    def register(self, wallet_id: str, contract_instance_id: str) -> None:
        self._contracts[wallet_id] = contract_instance_id
        self.wallets.append(wallet_id)

    def contract_for(self, wallet_id: str) -> str:
        try:
            return self._contracts[wallet_id]
        except KeyError:
            raise UnknownWalletError(wallet_id) from None

    def __contains__(self, wallet_id: object) -> bool:
        return wallet_id in self._contracts

    def __len__(self) -> int:
        return len(self._contracts)
