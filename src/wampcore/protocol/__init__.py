""" The transport-agnostic half of wampcore: the WAMP v1 message model and
    the client-side state the dispatcher routes messages into. Nothing in
    this package touches a socket.
"""

from . import message
from . import uri
from . import call
from . import subscribe
from . import session

from .message import decode
from .uri import PrefixMap
from .call import CallRegistry, PendingCall
from .subscribe import SubscriptionTable
from .session import SessionState


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
