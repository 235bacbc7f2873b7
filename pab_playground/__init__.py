"""Client-side store for the PAB uniswap playground."""
from .models import Asset, ContractInstance, Loadings, LogEntry, LogType
from .store import Store

__all__ = ["Asset", "ContractInstance", "Loadings", "LogEntry", "LogType", "Store"]
