""" The WAMP v1 client. A :class:`Client` sits on top of a transport that
    moves whole text messages, and does two jobs: it turns method calls
    (call, subscribe, publish, and so on) into outbound messages, and it
    routes every inbound message to whichever pending call, subscription,
    or session field it belongs to.
"""

import logging
import threading

from . import config
from . import transport as transport_module
from .protocol import message
from .protocol.call import CallRegistry
from .protocol.session import SessionState
from .protocol.subscribe import SubscriptionTable
from .protocol.uri import PrefixMap

logger = logging.getLogger(__name__)


class Client:
    """ A WAMP v1 client bound to a single *transport*, which must follow
        the :class:`wampcore.transport.base.Transport` contract. The client
        registers itself as the transport's inbound message handler.

        Calls and subscriptions are asynchronous: no method here waits for
        the server. Results, errors, and events are delivered by invoking
        the callbacks supplied by the caller, from whichever thread the
        transport delivers inbound messages on. Inbound messages are handled
        strictly one at a time, in arrival order; a callback runs to
        completion before the next message is examined.

        :ivar prefixes: The :class:`PrefixMap` of URI prefixes.
        :ivar calls: The :class:`CallRegistry` of outstanding calls.
        :ivar subscriptions: The :class:`SubscriptionTable` of active topics.
        :ivar session: The :class:`SessionState` set by the WELCOME message.
    """

    def __init__(self, transport):

        self.transport = transport

        # One lock covers the prefix map, the call registry, and the
        # subscription table. A second lock serializes inbound dispatch.
        # Both are re-entrant so that callbacks can use the client.

        self.lock = threading.RLock()
        self.dispatch_lock = threading.RLock()

        self.prefixes = PrefixMap()
        self.calls = CallRegistry(self.lock, dispatch_lock=self.dispatch_lock)
        self.subscriptions = SubscriptionTable(self.lock)
        self.session = SessionState()

        self.handlers = dict()
        self.handlers[message.WELCOME] = self._on_welcome
        self.handlers[message.CALLRESULT] = self._on_call_result
        self.handlers[message.CALLERROR] = self._on_call_error
        self.handlers[message.EVENT] = self._on_event

        transport.register(self.receive)


    def __enter__(self):
        self.connect()
        return self


    def __exit__(self, *exc_info):
        self.disconnect()


    @property
    def connected(self):
        return self.transport.is_open


    def connect(self):
        """ Open the transport. Returns True if a new connection was made;
            returns False if the transport was already open, or if it could
            not be opened. Any messages the transport received while opening
            the connection are dispatched before this method returns.
        """

        if self.transport.is_open:
            return False

        # Holding the dispatch lock keeps the transport from delivering
        # anything newer until the residual messages have been handled.

        with self.dispatch_lock:
            connected = self.transport.open()

            if connected:
                for frame in self.transport.residual():
                    self.receive(frame)

        return connected


    def disconnect(self):
        """ Close the transport and forget everything associated with the
            connection: prefixes, subscriptions, outstanding calls, and the
            session. Outstanding calls are discarded without invoking any of
            their callbacks.
        """

        self.transport.close()

        with self.dispatch_lock, self.lock:
            self.prefixes.clear()
            self.subscriptions.clear()
            discarded = self.calls.clear()
            self.session.reset()

        if discarded:
            logger.debug("disconnect discarded %d pending calls", len(discarded))


    def wait_welcome(self, timeout=None):
        """ Block until the server's WELCOME message has been handled, or
            until *timeout* seconds have passed. Returns True if the session
            is established.
        """

        return self.session.wait(timeout)


    def send(self, outbound):
        """ Encode a :class:`wampcore.protocol.message.Message` and hand it to
            the transport. Returns the transport's verdict: True if the
            message was accepted for sending, False otherwise.
        """

        sent = self.transport.send(outbound.encode())

        if not sent:
            logger.warning("failed to send %r", outbound)

        return sent


    def prefix(self, prefix, uri):
        """ Establish *prefix* as shorthand for *uri*, both locally and with
            the server.
        """

        with self.lock:
            self.prefixes.add(prefix, uri)
            return self.send(message.Prefix(prefix, uri))


    def unprefix(self, prefix):
        """ Forget a prefix. This is a local change only; WAMP v1 has no
            message to withdraw a prefix from the server.
        """

        with self.lock:
            self.prefixes.remove(prefix)


    def call(self, uri, success=None, error=None, *args, timeout=None):
        """ Invoke the remote procedure *uri* with positional *args*. When
            the server responds, *success* is invoked with the result, or
            *error* is invoked with the error description and the error
            details (None if the server sent none). Either callback may be
            None, but not both.

            If a *timeout* in seconds is specified, or if
            :data:`wampcore.config.call_timeout` is set, a call that sees no
            response in time is abandoned and *error* is invoked with a
            local timeout description; a *timeout* of zero disables the
            deadline for this call.

            Returns the call ID, or None if the transport refused the
            message, in which case neither callback will ever be invoked.
        """

        if timeout is None:
            timeout = config.call_timeout

        pending = self.calls.add(uri, success, error, timeout)
        call_id = pending.call_id

        try:
            sent = self.send(message.Call(call_id, uri, *args))
        except TypeError:
            # The arguments could not be encoded as JSON.
            self.calls.pop(call_id)
            raise

        if not sent:
            self.calls.pop(call_id)
            return None

        return call_id


    def subscribe(self, topic, callback):
        """ Invoke *callback* with the event payload for every EVENT
            published to *topic*. The server is only told about the first
            subscription to a given topic; registering the same callback
            twice for the same topic has no additional effect.

            The SUBSCRIBE message for a new topic is sent before *callback*
            is checked; a TypeError for a non-callable *callback* leaves the
            topic subscribed with no callbacks.
        """

        with self.lock:
            uri = self.prefixes.resolve(topic)

            if self.subscriptions.create(uri):
                self.send(message.Subscribe(topic))

            if callable(callback):
                pass
            else:
                raise TypeError('callback must be callable')

            self.subscriptions.add(uri, callback)


    def unsubscribe(self, topic, callback=None):
        """ Remove *callback* from the callbacks for *topic*. If no
            *callback* is specified, all callbacks for the topic are removed.
            The server is told once no callbacks remain.
        """

        with self.lock:
            uri = self.prefixes.resolve(topic)

            if self.subscriptions.remove(uri, callback):
                self.send(message.Unsubscribe(topic))


    def publish(self, topic, event, exclude=False, eligible=None):
        """ Publish *event* to *topic*. A local subscription to the topic is
            not required. *exclude* is either a boolean, where True excludes
            this session from receiving the event, or a list of session IDs
            to exclude; *eligible* is a list of session IDs that may receive
            the event, where an empty list means all sessions.
        """

        return self.send(message.Publish(topic, event, exclude, eligible))


    def receive(self, frame):
        """ Handle a single inbound message. Frames that cannot be decoded,
            that carry an unknown message type, or that carry a message type
            a client never receives, are dropped on purpose: a newer server
            may speak a superset of the protocol, and that is not an error.
        """

        with self.dispatch_lock:
            try:
                inbound = message.decode(frame)
            except ValueError as e:
                logger.debug("dropping inbound frame: %s", e)
                return

            try:
                handler = self.handlers[inbound.type]
            except KeyError:
                logger.debug("dropping inbound %r", inbound)
                return

            handler(inbound)


    def _invoke(self, callback, *args):
        """ Invoke a user-supplied callback. An exception raised by the
            callback is logged; it does not interrupt dispatch.
        """

        try:
            callback(*args)
        except Exception:
            logger.exception("callback %r raised an exception", callback)


    def _on_welcome(self, inbound):

        welcomed = self.session.welcome(inbound.session_id, inbound.protocol_version, inbound.server_ident)

        if welcomed:
            logger.debug("session %s established with %s", inbound.session_id, inbound.server_ident)
        else:
            logger.warning("ignoring repeated WELCOME for session %s", inbound.session_id)


    def _on_call_result(self, inbound):

        pending = self.calls.pop(inbound.call_id)

        if pending is None:
            logger.debug("no pending call for result %r", inbound.call_id)
            return

        self._invoke(pending.complete, inbound.result)


    def _on_call_error(self, inbound):

        pending = self.calls.pop(inbound.call_id)

        if pending is None:
            logger.debug("no pending call for error %r", inbound.call_id)
            return

        self._invoke(pending.fail, inbound.description, inbound.details)


    def _on_event(self, inbound):

        with self.lock:
            uri = self.prefixes.resolve(inbound.topic)
            callbacks = self.subscriptions.callbacks(uri)

        for callback in callbacks:
            self._invoke(callback, inbound.event)


# end of class Client



def connect(address, port, backend=None):
    """ Convenience function: create a transport for *address* and *port*
        via :func:`wampcore.transport.create`, wrap it in a :class:`Client`,
        and connect. The :class:`Client` is returned whether or not the
        connection succeeded; check :attr:`Client.connected`.
    """

    transport = transport_module.create(address, port, backend)
    instance = Client(transport)
    instance.connect()
    return instance


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
