import pytest
import wampcore


class RecordingTransport(wampcore.transport.Transport):
    """ In-memory transport: everything sent is decoded and kept in the
        *sent* list, and inbound messages are injected by calling
        :func:`inject` directly. *greeting* frames are handed back by
        :func:`residual` after a successful :func:`open`.
    """

    def __init__(self, greeting=(), accept=True, reachable=True):
        wampcore.transport.Transport.__init__(self)
        self.greeting = list(greeting)
        self.accept = accept
        self.reachable = reachable
        self.opened = 0
        self.closed = 0
        self.sent = list()
        self._open = False

    @property
    def is_open(self):
        return self._open

    def open(self):
        if self.reachable == False:
            return False

        self.opened += 1
        self._open = True
        self._residual = list(self.greeting)
        return True

    def close(self):
        self.closed += 1
        self._open = False

    def send(self, text):
        if self.accept == False:
            return False

        self.sent.append(wampcore.json.loads(text))
        return True

    def inject(self, *parts):
        self.deliver(wampcore.json.dumps(list(parts)))

    def sent_of_type(self, type):
        return [parts for parts in self.sent if parts[0] == type]


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def client(transport):
    instance = wampcore.Client(transport)
    instance.connect()
    yield instance
    instance.disconnect()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
