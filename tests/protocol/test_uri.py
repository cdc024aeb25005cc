import wampcore


def test_resolve():

    prefixes = wampcore.protocol.PrefixMap()
    assert prefixes.resolve('calc') == 'calc'

    prefixes.add('calc', 'http://example.com/simple/calc#')
    assert 'calc' in prefixes
    assert prefixes.resolve('calc') == 'http://example.com/simple/calc#'

    # Anything that isn't a known prefix is presumed to already be a URI.

    assert prefixes.resolve('http://example.com/other') == 'http://example.com/other'
    assert prefixes.resolve('calc:add') == 'calc:add'


def test_last_write_wins():

    prefixes = wampcore.protocol.PrefixMap()
    prefixes.add('foo', 'http://x/one')
    prefixes.add('foo', 'http://x/two')

    assert len(prefixes) == 1
    assert prefixes.resolve('foo') == 'http://x/two'


def test_remove():

    prefixes = wampcore.protocol.PrefixMap()
    prefixes.add('foo', 'http://x/y')
    prefixes.remove('foo')

    assert 'foo' not in prefixes
    assert prefixes.resolve('foo') == 'foo'

    # Removing an unknown prefix is a no-op.

    prefixes.remove('never')


def test_unhashable_token():

    prefixes = wampcore.protocol.PrefixMap()
    token = ['not', 'a', 'uri']
    assert prefixes.resolve(token) is token


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
