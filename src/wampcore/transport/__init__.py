"""Transport layer implementations."""

from .. import config

from .base import Transport


def create(address, port, backend=None):
    """Instantiate a transport for the server at *address* and *port*. The
    backend is chosen by :data:`wampcore.config.transport` unless one is
    named explicitly.
    """

    if backend is None:
        backend = config.transport

    if backend == "zmq":
        from .zmq import ZMQTransport
        return ZMQTransport(address, port)

    raise ValueError(f"unknown transport backend: {backend!r}")
