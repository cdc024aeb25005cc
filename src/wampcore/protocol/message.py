""" A class representation of a WAMP v1 message, including subclasses for
    each of the message types.
"""

from .. import json


# Message type discriminants; the first element of every JSON array on the
# wire is one of these integers.

WELCOME = 0
PREFIX = 1
CALL = 2
CALLRESULT = 3
CALLERROR = 4
SUBSCRIBE = 5
UNSUBSCRIBE = 6
PUBLISH = 7
EVENT = 8

names = {
    WELCOME: 'WELCOME',
    PREFIX: 'PREFIX',
    CALL: 'CALL',
    CALLRESULT: 'CALLRESULT',
    CALLERROR: 'CALLERROR',
    SUBSCRIBE: 'SUBSCRIBE',
    UNSUBSCRIBE: 'UNSUBSCRIBE',
    PUBLISH: 'PUBLISH',
    EVENT: 'EVENT',
}


class Message:
    """ The :class:`Message` provides a very thin encapsulation of what it
        means to be a message in a WAMP v1 context. Every message is a JSON
        array; the first element is the integer message *type*, and the
        remaining elements are positional fields whose meaning depends on
        the type. Subclasses assign names to those positional fields.

        Iterating over a :class:`Message` yields the elements of the array
        as it will appear on the wire.

        :ivar type: The integer message type discriminant.
        :ivar minimum: The number of fields required after the type.
    """

    type = None
    minimum = 0

    def __init__(self):
        self.parts = None


    def __iter__(self):
        self._finalize()
        return iter(self.parts)


    def __eq__(self, other):
        if isinstance(other, Message):
            return tuple(self) == tuple(other)
        return NotImplemented


    def __repr__(self):
        self._finalize()
        return names[self.type] + ': ' + repr(list(self.parts[1:]))


    def _fields(self):
        """ Return the positional fields following the type, in wire order.
        """

        return ()


    def _finalize(self):
        """ Assemble the tuple that will be encoded as the JSON array for
            this message. This is only done once; the result is cached.
        """

        if self.parts is None:
            self.parts = (self.type,) + tuple(self._fields())


    def encode(self):
        """ Return the JSON text representation of this message, suitable
            for handing to a transport.
        """

        encoded = json.dumps(list(self))
        return encoded.decode()


    @classmethod
    def from_parts(cls, parts):
        """ Construct an instance from a decoded JSON array. The first
            element is the type and is not checked here; the remainder must
            include at least :attr:`minimum` fields.
        """

        fields = parts[1:]

        if len(fields) < cls.minimum:
            raise ValueError("%s requires %d fields, got %d" % (names[cls.type], cls.minimum, len(fields)))

        return cls(*fields)


# end of class Message



class Welcome(Message):
    """ The first message sent by the server once a connection is made.
    """

    type = WELCOME
    minimum = 3

    def __init__(self, session_id, protocol_version, server_ident, *extra):
        Message.__init__(self)
        self.session_id = session_id
        self.protocol_version = protocol_version
        self.server_ident = server_ident

    def _fields(self):
        return (self.session_id, self.protocol_version, self.server_ident)



class Prefix(Message):

    type = PREFIX
    minimum = 2

    def __init__(self, prefix, uri, *extra):
        Message.__init__(self)
        self.prefix = prefix
        self.uri = uri

    def _fields(self):
        return (self.prefix, self.uri)



class Call(Message):
    """ A remote procedure call. Any number of positional *args* follow the
        procedure URI on the wire.
    """

    type = CALL
    minimum = 2

    def __init__(self, call_id, uri, *args):
        Message.__init__(self)
        self.call_id = call_id
        self.uri = uri
        self.args = args

    def _fields(self):
        return (self.call_id, self.uri) + tuple(self.args)



class CallResult(Message):

    type = CALLRESULT
    minimum = 2

    def __init__(self, call_id, result, *extra):
        Message.__init__(self)
        self.call_id = call_id
        self.result = result

    def _fields(self):
        return (self.call_id, self.result)



class CallError(Message):
    """ A failed remote procedure call. The *details* field is optional on
        the wire; it is None here when it was not provided, and is omitted
        from the encoded form when it is None.
    """

    type = CALLERROR
    minimum = 3

    def __init__(self, call_id, error_uri, description, details=None, *extra):
        Message.__init__(self)
        self.call_id = call_id
        self.error_uri = error_uri
        self.description = description
        self.details = details

    def _fields(self):
        fields = (self.call_id, self.error_uri, self.description)

        if self.details is not None:
            fields = fields + (self.details,)

        return fields



class Subscribe(Message):

    type = SUBSCRIBE
    minimum = 1

    def __init__(self, topic, *extra):
        Message.__init__(self)
        self.topic = topic

    def _fields(self):
        return (self.topic,)



class Unsubscribe(Subscribe):

    type = UNSUBSCRIBE



class Publish(Message):
    """ Publish an *event* to a topic. *exclude* is either a boolean (exclude
        the publishing session itself) or a list of session IDs; *eligible*
        is a list of session IDs, where an empty list means everyone.
    """

    type = PUBLISH
    minimum = 2

    def __init__(self, topic, event, exclude=False, eligible=None, *extra):
        Message.__init__(self)

        if eligible is None:
            eligible = list()

        self.topic = topic
        self.event = event
        self.exclude = exclude
        self.eligible = eligible

    def _fields(self):
        return (self.topic, self.event, self.exclude, list(self.eligible))



class Event(Message):

    type = EVENT
    minimum = 2

    def __init__(self, topic, event, *extra):
        Message.__init__(self)
        self.topic = topic
        self.event = event

    def _fields(self):
        return (self.topic, self.event)


# end of Message subclasses


classes = {
    WELCOME: Welcome,
    PREFIX: Prefix,
    CALL: Call,
    CALLRESULT: CallResult,
    CALLERROR: CallError,
    SUBSCRIBE: Subscribe,
    UNSUBSCRIBE: Unsubscribe,
    PUBLISH: Publish,
    EVENT: Event,
}


def decode(frame):
    """ Decode a single inbound *frame*, either bytes or str, into the
        appropriate :class:`Message` subclass. A ValueError is raised if
        the frame is not a JSON array, if the first element is not a known
        integer message type, or if required fields are missing.
    """

    try:
        parts = json.loads(frame)
    except json.DecodeError as e:
        raise ValueError('frame is not valid JSON: ' + str(e))

    if isinstance(parts, list):
        pass
    else:
        raise ValueError('frame is not a JSON array')

    if len(parts) == 0:
        raise ValueError('frame is an empty JSON array')

    type = parts[0]

    # bool is a subclass of int; a JSON true/false is not a message type.

    if isinstance(type, bool) or not isinstance(type, int):
        raise ValueError('invalid message type: ' + repr(type))

    try:
        cls = classes[type]
    except KeyError:
        raise ValueError('unknown message type: ' + repr(type))

    return cls.from_parts(parts)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
