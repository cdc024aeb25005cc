""" Process-wide defaults for wampcore. Each value can be overridden via an
    environment variable, read once when this module is first imported;
    callers are also free to assign new values to the module attributes
    directly, which affects any subsequent use.
"""

import os


def _float(name, default):
    value = os.environ.get(name)

    if value is None or value.strip() == '':
        return default

    value = float(value)

    # A non-positive timeout means "no deadline", same as leaving it unset.

    if value <= 0:
        return None

    return value


def _int(name, default):
    value = os.environ.get(name)

    if value is None or value.strip() == '':
        return default

    return int(value)


# Which transport backend wampcore.transport.create() will instantiate.

transport = os.environ.get('WAMPCORE_TRANSPORT', 'zmq')

# Default deadline, in seconds, applied to each RPC call. None disables the
# deadline, in which case a call without a response remains pending until
# the client disconnects.

call_timeout = _float('WAMPCORE_CALL_TIMEOUT', None)

# How many times a colliding call ID will be regenerated before giving up.

id_attempts = _int('WAMPCORE_ID_ATTEMPTS', 100)

# Length of generated call IDs.

id_length = _int('WAMPCORE_ID_LENGTH', 16)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
