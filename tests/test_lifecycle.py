import threading
import wampcore

from wampcore.protocol import message
from conftest import RecordingTransport


def welcome_frame(session_id='v59mbCGDXZ7WTyxB', version=1, ident='Autobahn/0.5.1'):
    return wampcore.json.dumps([message.WELCOME, session_id, version, ident])


def test_connect():

    transport = RecordingTransport()
    client = wampcore.Client(transport)

    assert client.connected == False
    assert client.connect() == True
    assert client.connected == True
    assert transport.opened == 1

    # Already connected: nothing happens.

    assert client.connect() == False
    assert transport.opened == 1


def test_connect_failure():

    transport = RecordingTransport(reachable=False)
    client = wampcore.Client(transport)

    assert client.connect() == False
    assert client.connected == False


def test_connect_dispatches_residual():
    """ Messages the transport received while establishing the connection
        are handled before connect() returns.
    """

    transport = RecordingTransport(greeting=[welcome_frame()])
    client = wampcore.Client(transport)

    assert client.session.welcome_received == False
    assert client.connect() == True

    session = client.session
    assert session.welcome_received == True
    assert session.session_id == 'v59mbCGDXZ7WTyxB'
    assert session.protocol_version == 1
    assert session.server_ident == 'Autobahn/0.5.1'
    assert client.wait_welcome(0) == True


def test_welcome(client, transport):

    assert client.wait_welcome(0) == False

    transport.deliver(welcome_frame('abc', 1, 'Server/1.0'))
    assert client.session.welcome_received == True
    assert client.session.session_id == 'abc'

    # A repeated welcome does not overwrite the session.

    transport.deliver(welcome_frame('xyz', 1, 'Server/2.0'))
    assert client.session.session_id == 'abc'
    assert client.session.server_ident == 'Server/1.0'


def test_wait_welcome(client, transport):

    def later():
        transport.deliver(welcome_frame())

    timer = threading.Timer(0.05, later)
    timer.start()

    assert client.wait_welcome(2) == True
    timer.join()


def test_disconnect_resets_state():

    transport = RecordingTransport(greeting=[welcome_frame()])
    client = wampcore.Client(transport)
    client.connect()

    test_disconnect_resets_state.fired = list()

    def on_success(result):
        test_disconnect_resets_state.fired.append(result)

    def on_event(event):
        test_disconnect_resets_state.fired.append(event)

    client.prefix('foo', 'http://x/y')
    client.subscribe('foo', on_event)
    call_id = client.call('add', on_success, None, 2, 3, timeout=60)

    assert len(client.subscriptions) == 1
    assert len(client.calls) == 1
    assert client.session.welcome_received == True

    client.disconnect()

    assert transport.closed == 1
    assert client.connected == False
    assert len(client.subscriptions) == 0
    assert len(client.calls) == 0
    assert len(client.prefixes) == 0
    assert client.session.welcome_received == False
    assert client.session.session_id is None

    # Nothing is delivered for the state that was discarded.

    transport.inject(message.CALLRESULT, call_id, 5)
    transport.inject(message.EVENT, 'http://x/y', 'event')
    assert test_disconnect_resets_state.fired == []

    # A new connection starts over with a fresh welcome exchange.

    transport.greeting = list()
    assert client.connect() == True
    assert client.session.welcome_received == False

    client.subscribe('foo', on_event)
    assert transport.sent_of_type(message.SUBSCRIBE) == [[message.SUBSCRIBE, 'foo'], [message.SUBSCRIBE, 'foo']]
    assert 'foo' in client.subscriptions


def test_context_manager():

    transport = RecordingTransport(greeting=[welcome_frame()])

    with wampcore.Client(transport) as client:
        assert client.connected == True
        assert client.session.welcome_received == True

    assert client.connected == False
    assert client.session.welcome_received == False


def test_registers_handler():

    transport = RecordingTransport()
    client = wampcore.Client(transport)

    assert transport.handler == client.receive


def test_create_unknown_backend():

    try:
        wampcore.transport.create('localhost', 1234, backend='carrier-pigeon')
    except ValueError:
        pass
    else:
        raise AssertionError('unknown backend should be refused')


def test_transport_failures_are_results():
    """ Transports report failure through their return values; there are no
        transport exception classes to catch.
    """

    for name in dir(wampcore.transport):
        value = getattr(wampcore.transport, name)
        if isinstance(value, type):
            assert issubclass(value, Exception) == False

    transport = RecordingTransport(reachable=False)
    assert transport.open() == False

    transport = RecordingTransport(accept=False)
    transport.open()
    assert transport.send('[5, "t"]') == False


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
