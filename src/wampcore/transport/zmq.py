"""ZeroMQ message transport.

Each WAMP message travels as a single ZeroMQ frame of UTF-8 JSON text over a
DEALER socket, which pairs with a ROUTER socket on the server side.

ZeroMQ has no connection handshake of its own: a ROUTER does not know a
DEALER exists until the DEALER sends something. :meth:`ZMQTransport.open`
therefore sends one empty greeting frame and waits for the server's first
message, which for a WAMP server is always its WELCOME. That first message
is kept aside and returned by :meth:`ZMQTransport.residual`; the client is
expected to dispatch it once :meth:`ZMQTransport.open` has returned.
"""

from __future__ import annotations

import itertools
import logging
import queue
import threading
from typing import Optional, Tuple

import zmq

from .base import Transport


logger = logging.getLogger(__name__)

zmq_context = zmq.Context()
_signal_ticker = itertools.count()


class ZMQTransport(Transport):
    """Send and receive WAMP messages via a ZeroMQ DEALER socket.

    All socket activity after the handshake happens on a single background
    thread; :meth:`send` queues the outbound text and wakes that thread via
    an inproc PAIR socket, since ZeroMQ sockets are not thread-safe.
    """

    handshake_timeout = 2.0
    poll_interval = 1000

    def __init__(self, address: str, port: int, identity: Optional[bytes] = None):
        Transport.__init__(self)

        self.address = address
        self.port = int(port)
        self.identity = identity

        self.socket = None
        self._signal_rx = None
        self._signal_tx = None
        self._signal_lock = threading.Lock()
        self._outbox = queue.SimpleQueue()
        self._thread: Optional[threading.Thread] = None
        self._shutdown = False
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def endpoint(self) -> str:
        return f"tcp://{self.address}:{self.port}"

    # --- lifecycle ---

    def open(self) -> bool:
        if self._open:
            return True

        socket = zmq_context.socket(zmq.DEALER)
        socket.setsockopt(zmq.LINGER, 0)

        if self.identity is not None:
            socket.identity = self.identity

        try:
            socket.connect(self.endpoint)
            greeting = self._handshake(socket)
        except zmq.ZMQError as exc:
            logger.warning("%s: connection failed: %s", self.endpoint, exc)
            socket.close()
            return False

        if greeting is None:
            logger.warning("%s: no greeting in %.2f sec", self.endpoint, self.handshake_timeout)
            socket.close()
            return False

        internal = f"inproc://wampcore.ZMQTransport:signal:{next(_signal_ticker)}"
        self._signal_rx = zmq_context.socket(zmq.PAIR)
        self._signal_rx.setsockopt(zmq.LINGER, 0)
        self._signal_rx.bind(internal)
        self._signal_tx = zmq_context.socket(zmq.PAIR)
        self._signal_tx.setsockopt(zmq.LINGER, 0)
        self._signal_tx.connect(internal)

        self.socket = socket
        self._residual = [greeting]
        self._outbox = queue.SimpleQueue()
        self._shutdown = False
        self._open = True

        self._thread = threading.Thread(target=self.run, daemon=True)
        self._thread.start()

        logger.debug("%s: connected", self.endpoint)
        return True

    def _handshake(self, socket) -> Optional[bytes]:
        """Send the empty greeting and wait for the server's first message."""
        socket.send(b"", flags=zmq.NOBLOCK)

        poller = zmq.Poller()
        poller.register(socket, zmq.POLLIN)

        if not poller.poll(self.handshake_timeout * 1000):
            return None

        parts = socket.recv_multipart()
        return parts[-1]

    def close(self) -> None:
        if not self._open:
            return

        self._open = False
        self._shutdown = True
        self._wake()

        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(self.poll_interval / 1000.0 * 2)
        self._thread = None

        for socket in (self.socket, self._signal_tx, self._signal_rx):
            if socket is not None:
                socket.close()

        self.socket = None
        self._signal_tx = None
        self._signal_rx = None
        self._residual = []

        logger.debug("%s: closed", self.endpoint)

    # --- outbound ---

    def send(self, text: str) -> bool:
        if not self._open:
            return False

        self._outbox.put(text)

        try:
            return self._wake()
        except zmq.ZMQError as exc:
            logger.warning("%s: send failed: %s", self.endpoint, exc)
            return False

    def _wake(self) -> bool:
        # The lock around the signal socket is necessary in a multithreaded
        # application; the PAIR socket, like any ZeroMQ socket, is not safe
        # to share between threads without it.

        with self._signal_lock:
            signal = self._signal_tx
            if signal is None:
                return False
            signal.send(b"")

        return True

    def _handle_outgoing(self) -> None:
        # Clear one signal and send one queued message, if there is one; the
        # wake-up issued by close() has no message behind it.
        self._signal_rx.recv(flags=zmq.NOBLOCK)

        try:
            text = self._outbox.get(block=False)
        except queue.Empty:
            return

        self.socket.send(text.encode())

    # --- inbound ---

    def _handle_incoming(self, parts: Tuple[bytes, ...]) -> None:
        # A ROUTER peer may or may not insert an empty delimiter frame; the
        # message itself is always the last frame.
        frame = parts[-1]

        if frame == b"":
            return

        try:
            self.deliver(frame)
        except Exception:
            logger.exception("%s: inbound message handler failed", self.endpoint)

    def run(self) -> None:
        poller = zmq.Poller()
        poller.register(self.socket, zmq.POLLIN)
        poller.register(self._signal_rx, zmq.POLLIN)

        while not self._shutdown:
            for active, _flag in poller.poll(self.poll_interval):
                if self._shutdown:
                    break
                elif active == self._signal_rx:
                    self._handle_outgoing()
                elif active == self.socket:
                    parts = tuple(self.socket.recv_multipart())
                    self._handle_incoming(parts)

