""" Python implementation of a WAMP v1 client core: remote procedure calls
    and publish/subscribe over any transport that can move whole text
    messages in both directions.
"""

# Utility components.

from . import json
from . import config

# Submodules used by multiple other components.

from . import protocol
from . import transport

# Primary public-facing interfaces.

from . import client
from .client import Client, connect

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
