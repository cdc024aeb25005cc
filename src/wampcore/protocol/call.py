""" Client-side bookkeeping for outstanding remote procedure calls. Each
    call is identified by a locally generated string; the identifier is
    echoed back by the server in the CALLRESULT or CALLERROR message, which
    is how a response is tied back to the continuations of the original
    caller.
"""

import logging
import random
import string
import threading

from .. import config

logger = logging.getLogger(__name__)

alphabet = string.ascii_letters + string.digits

# The URI handed to an error continuation when a call is abandoned locally
# because its deadline expired. This never appears on the wire.

TIMEOUT_URI = 'http://wampcore/error#timeout'


def random_id(length=None):
    """ Return a random alphanumeric string of the requested *length*. The
        identifiers only need to be unique among outstanding calls, they do
        not need to be unpredictable.
    """

    if length is None:
        length = config.id_length

    return ''.join(random.choices(alphabet, k=length))



def validate(success, error):
    """ Raise a TypeError if the continuations supplied for a call are not
        usable: each one that is provided must be callable, and at least one
        of them must be provided.
    """

    if success is None and error is None:
        raise TypeError('a success or error callback must be specified')

    if success is not None and not callable(success):
        raise TypeError('success callback must be callable')

    if error is not None and not callable(error):
        raise TypeError('error callback must be callable')



class PendingCall:
    """ A single outstanding call. At most one of the continuations will be
        invoked, at most once; whoever removes the :class:`PendingCall` from
        the :class:`CallRegistry` is the only party entitled to invoke it.

        :ivar call_id: The identifier sent in the CALL message.
        :ivar uri: The procedure URI, as given by the caller.
        :ivar timeout: Deadline in seconds, or None for no deadline.
    """

    def __init__(self, call_id, uri, success=None, error=None, timeout=None):

        self.call_id = call_id
        self.uri = uri
        self.success = success
        self.error = error
        self.timeout = timeout
        self.timer = None


    def __repr__(self):
        return "PendingCall(%r, %r)" % (self.call_id, self.uri)


    def arm(self, expire):
        """ Start the deadline timer, if this call has a deadline. The
            *expire* callable is invoked with the call ID when the deadline
            passes.
        """

        if self.timeout is None:
            return

        timer = threading.Timer(self.timeout, expire, args=(self.call_id,))
        timer.daemon = True
        self.timer = timer
        timer.start()


    def cancel(self):
        timer = self.timer

        if timer is not None:
            timer.cancel()
            self.timer = None


    def complete(self, result):
        """ Invoke the success continuation, if any, with the call *result*.
        """

        if self.success is not None:
            self.success(result)


    def fail(self, description, details=None):
        """ Invoke the error continuation, if any.
        """

        if self.error is not None:
            self.error(description, details)


# end of class PendingCall



class CallRegistry:
    """ All outstanding calls for a single client, keyed by call ID. The
        *lock* is shared with the owning client so that registration and
        removal are atomic with respect to inbound message dispatch; a
        private lock is created if none is provided.

        The registry never invokes a continuation on behalf of a response.
        The only continuation it invokes itself is the error continuation
        of a call whose deadline has expired; that happens while holding
        *dispatch_lock*, the same lock the owning client holds while it
        handles an inbound message, so the timeout notification never
        overlaps another callback.
    """

    def __init__(self, lock=None, generator=None, dispatch_lock=None):

        if lock is None:
            lock = threading.RLock()

        if dispatch_lock is None:
            dispatch_lock = threading.RLock()

        if generator is None:
            generator = random_id

        self.lock = lock
        self.dispatch_lock = dispatch_lock
        self.generator = generator
        self._pending = dict()


    def __contains__(self, call_id):
        return call_id in self._pending


    def __len__(self):
        return len(self._pending)


    def ids(self):
        with self.lock:
            return tuple(self._pending)


    def _new_id(self):
        """ Generate a call ID not used by any outstanding call. The caller
            must hold the lock.
        """

        attempts = config.id_attempts

        for attempt in range(attempts):
            call_id = self.generator()
            if call_id not in self._pending:
                return call_id

        raise RuntimeError("no unique call ID after %d attempts" % (attempts))


    def add(self, uri, success=None, error=None, timeout=None):
        """ Register a new outstanding call to *uri* and return the
            :class:`PendingCall` instance. The continuations are validated
            before anything is registered.
        """

        validate(success, error)

        if timeout is not None and timeout <= 0:
            timeout = None

        with self.lock:
            call_id = self._new_id()
            pending = PendingCall(call_id, uri, success, error, timeout)
            self._pending[call_id] = pending
            pending.arm(self.expire)

        return pending


    def pop(self, call_id):
        """ Remove and return the :class:`PendingCall` for *call_id*, or
            None if there is no such call. Any deadline timer is cancelled.
        """

        with self.lock:
            try:
                pending = self._pending.pop(call_id)
            except (KeyError, TypeError):
                return None

        pending.cancel()
        return pending


    def clear(self):
        """ Discard every outstanding call without invoking any continuation.
            The discarded calls are returned.
        """

        with self.lock:
            discarded = list(self._pending.values())
            self._pending.clear()

        for pending in discarded:
            pending.cancel()

        return discarded


    def expire(self, call_id):
        """ Deadline handler: abandon the call and notify the caller via the
            error continuation. A response arriving after this point will not
            find the call and will be dropped.
        """

        pending = self.pop(call_id)

        if pending is None:
            return

        description = "call to %s timed out after %.2f sec" % (pending.uri, pending.timeout)

        details = dict()
        details['uri'] = TIMEOUT_URI
        details['call'] = call_id
        details['timeout'] = pending.timeout

        logger.debug(description)

        with self.dispatch_lock:
            try:
                pending.fail(description, details)
            except Exception:
                logger.exception("error callback for %s raised an exception", call_id)


# end of class CallRegistry


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
