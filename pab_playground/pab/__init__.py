"""PAB transport and request encoding."""
from .client import PabClient
from .request_body import ACTIONS, encode_action_body

__all__ = ["ACTIONS", "PabClient", "encode_action_body"]
