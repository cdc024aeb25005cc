""" The client-side record of topic subscriptions. Topics are keyed by
    their fully resolved URI; each topic maps to an ordered list of distinct
    callbacks that will receive every EVENT published to that topic.

    The table itself does not talk to the transport. The transitions that
    require a SUBSCRIBE or UNSUBSCRIBE message are reported back to the
    caller via the return values of :func:`SubscriptionTable.add` and
    :func:`SubscriptionTable.remove`.
"""

import threading


class SubscriptionTable:

    def __init__(self, lock=None):

        if lock is None:
            lock = threading.RLock()

        self.lock = lock
        self._topics = dict()


    def __contains__(self, uri):
        return uri in self._topics


    def __len__(self):
        return len(self._topics)


    def topics(self):
        with self.lock:
            return tuple(self._topics)


    def callbacks(self, uri):
        """ Return a snapshot of the callbacks registered for *uri*, in
            registration order. The snapshot is safe to iterate while other
            threads modify the table.
        """

        with self.lock:
            try:
                callbacks = self._topics[uri]
            except (KeyError, TypeError):
                return ()

            return tuple(callbacks)


    def create(self, uri):
        """ Ensure an entry exists for *uri*. Returns True if the entry was
            newly created, in which case the caller is expected to send a
            SUBSCRIBE message for the topic.
        """

        with self.lock:
            if uri in self._topics:
                return False

            self._topics[uri] = list()
            return True


    def add(self, uri, callback):
        """ Append *callback* to the entry for *uri*, creating the entry if
            necessary. A callback already registered for this topic is not
            added a second time. Returns True if the entry was newly created.
        """

        with self.lock:
            created = self.create(uri)
            callbacks = self._topics[uri]

            if callback not in callbacks:
                callbacks.append(callback)

            return created


    def remove(self, uri, callback=None):
        """ Remove *callback* from the entry for *uri*; if no *callback* is
            specified, remove all callbacks. Returns True if the entry was
            removed as a result, in which case the caller is expected to
            send an UNSUBSCRIBE message for the topic. Returns False if
            there was no entry, or if other callbacks remain.
        """

        with self.lock:
            try:
                callbacks = self._topics[uri]
            except KeyError:
                return False

            if callback is None:
                callbacks.clear()
            else:
                try:
                    callbacks.remove(callback)
                except ValueError:
                    pass

            if callbacks:
                return False

            del self._topics[uri]
            return True


    def clear(self):
        with self.lock:
            self._topics.clear()


# end of class SubscriptionTable


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
