"""Cooperative cancellation helpers built on threading.Event."""

import threading
from typing import Optional

from .errors import OperationCancelledError


def raise_if_cancelled(cancel_event: Optional[threading.Event]) -> None:
    """Raise OperationCancelledError when the event exists and is set."""
    if cancel_event is not None and cancel_event.is_set():
        raise OperationCancelledError("Operation was cancelled")
