"""Context variables for structured logging."""

from contextvars import ContextVar
from typing import Dict, Optional

_provider: ContextVar[str] = ContextVar("provider", default="")
_grant_type: ContextVar[str] = ContextVar("grant_type", default="")
_trace_id: ContextVar[str] = ContextVar("trace_id", default="")


def set_log_context(
    provider: Optional[str] = None,
    grant_type: Optional[str] = None,
    trace_id: Optional[str] = None,
) -> None:
    if provider is not None:
        _provider.set(provider)
    if grant_type is not None:
        _grant_type.set(grant_type)
    if trace_id is not None:
        _trace_id.set(trace_id)


def get_log_context() -> Dict[str, str]:
    return {
        "provider": _provider.get(),
        "grant_type": _grant_type.get(),
        "trace_id": _trace_id.get(),
    }


def clear_log_context() -> None:
    _provider.set("")
    _grant_type.set("")
    _trace_id.set("")
