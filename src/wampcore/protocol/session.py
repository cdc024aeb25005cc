""" Session state established by the server's WELCOME message.
"""

import threading


class SessionState:
    """ Track whether the WELCOME message has arrived, and what it said.
        The fields are set together by :func:`welcome` and remain stable
        until :func:`reset` is called; a second WELCOME is refused.

        :ivar welcome_received: True once a WELCOME has been processed.
        :ivar session_id: The session ID assigned by the server, or None.
        :ivar protocol_version: WAMP protocol version announced by the server.
        :ivar server_ident: Free-form server identification string.
    """

    def __init__(self):

        self.lock = threading.Lock()
        self.welcomed = threading.Event()
        self._set(False, None, 1, '')


    def __repr__(self):
        return "SessionState(welcome_received=%r, session_id=%r, protocol_version=%r, server_ident=%r)" % (self.welcome_received, self.session_id, self.protocol_version, self.server_ident)


    def _set(self, welcome_received, session_id, protocol_version, server_ident):
        self.welcome_received = welcome_received
        self.session_id = session_id
        self.protocol_version = protocol_version
        self.server_ident = server_ident


    def welcome(self, session_id, protocol_version, server_ident):
        """ Record the contents of a WELCOME message. Returns False, without
            changing anything, if a WELCOME was already recorded.
        """

        with self.lock:
            if self.welcome_received:
                return False

            self._set(True, session_id, protocol_version, server_ident)

        self.welcomed.set()
        return True


    def reset(self):
        with self.lock:
            self.welcomed.clear()
            self._set(False, None, 1, '')


    def wait(self, timeout=None):
        """ Block until a WELCOME has been recorded. This is a wrapper to a
            :class:`threading.Event` instance; returns True if the welcome
            arrived, otherwise False after the requested *timeout*. If the
            *timeout* argument is None it will block indefinitely.
        """

        return self.welcomed.wait(timeout)


# end of class SessionState


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
