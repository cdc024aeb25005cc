"""Transport interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`wampcore.protocol` so the protocol remains
transport-agnostic. A transport moves whole text messages; any handshake
and framing needed to do so is the transport's own business.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Union


Frame = Union[bytes, str]


class Transport(ABC):
    """Minimal contract for a message-framed, bidirectional transport."""

    def __init__(self) -> None:
        self.handler: Optional[Callable[[Frame], None]] = None
        self._residual: List[Frame] = []

    def register(self, handler: Callable[[Frame], None]) -> None:
        """Install the callable invoked once per received message."""
        self.handler = handler

    def deliver(self, frame: Frame) -> None:
        """Hand a received message to the registered handler, if any."""
        handler = self.handler
        if handler is not None:
            handler(frame)

    def residual(self) -> List[Frame]:
        """Return, and forget, messages that arrived during the handshake.

        These were received before :meth:`open` returned and have not been
        delivered to the handler.
        """
        residual = self._residual
        self._residual = []
        return residual

    @abstractmethod
    def open(self) -> bool:
        """Establish the underlying connection; return whether it worked."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying connection."""

    @abstractmethod
    def send(self, text: str) -> bool:
        """Send one text message; return whether it was accepted."""

    @property
    def is_open(self) -> bool:
        """Whether the transport is currently connected."""
        return False
