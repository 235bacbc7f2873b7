"""Protocol interfaces for the PAB playground store."""
from .encoder import ActionEncoder
from .transport import FailureHook, PabTransport, SuccessHook

__all__ = ["ActionEncoder", "FailureHook", "PabTransport", "SuccessHook"]
