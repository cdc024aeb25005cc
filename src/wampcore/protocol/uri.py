""" Short-form prefixes for topic and procedure URIs. A prefix such as
    'calc' can stand in for 'http://example.com/simple/calc#' anywhere a
    URI is expected; the server is told about each prefix via a PREFIX
    message, and the client keeps its own copy so that inbound topics can
    be matched against subscriptions regardless of which form was used.
"""


class PrefixMap:
    """ Mapping of prefix to full URI. The last assignment for a given
        prefix wins.
    """

    def __init__(self):
        self._map = dict()


    def __contains__(self, prefix):
        return prefix in self._map


    def __len__(self):
        return len(self._map)


    def __iter__(self):
        return iter(tuple(self._map))


    def add(self, prefix, uri):
        self._map[prefix] = uri


    def remove(self, prefix):
        """ Forget the mapping for *prefix*. Unknown prefixes are ignored.
        """

        self._map.pop(prefix, None)


    def clear(self):
        self._map.clear()


    def resolve(self, token):
        """ Return the full URI for *token* if it is a known prefix,
            otherwise return *token* unchanged; it is assumed to already
            be a full URI.
        """

        try:
            return self._map[token]
        except (KeyError, TypeError):
            return token


# end of class PrefixMap


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
