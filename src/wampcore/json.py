''' Wrapper module to select the most performant available library to handle
    the equivalent of :func:`json.loads` and :func:`json.dumps`.
'''

# msgspec is an optional extra and is used when present; orjson is always
# installed.

import functools

msgspec = None
orjson = None

try:
    import msgspec
except ImportError:
    import orjson


# The msgspec 'encode' operation returns bytes, as does orjson.dumps. Both
# decoders accept either bytes or str. msgspec encodes integer dictionary
# keys as strings; orjson needs to be told to do the same.

if msgspec is not None:
    encoder = msgspec.json.Encoder()
    decoder = msgspec.json.Decoder()
    dumps = encoder.encode
    loads = decoder.decode
    DecodeError = msgspec.DecodeError
else:
    dumps = functools.partial(orjson.dumps, option=orjson.OPT_NON_STR_KEYS)
    loads = orjson.loads
    DecodeError = orjson.JSONDecodeError

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
