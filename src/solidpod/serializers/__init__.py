"""Line-delimited text representation of a resource.

A resource holds an ordered list of scalar values, one per line, with a
newline after every value including the last:

```pycon
>>> encode(['one', 2, True])
'one\\n2\\ntrue\\n'

>>> decode('one\\n2\\ntrue\\n')
['one', '2', 'true']
```

No type information survives the trip; everything comes back as `str`.
"""
from typing import Any, Iterable

from solidpod.exceptions import SerializationError

MEDIA_TYPE = 'text/plain'
DELIMITER = '\n'


def to_text(value: Any) -> str:
    """Convert a scalar value to its single-line text form. Booleans are
    written as `true` and `false`; everything else uses `str()`.

    Raises a `SerializationError` if the text contains a newline."""
    if isinstance(value, bool):
        text = 'true' if value else 'false'
    else:
        text = str(value)
    if DELIMITER in text:
        raise SerializationError(f'Value {text!r} contains a newline')
    return text


def encode(items: Iterable[Any]) -> str:
    return ''.join(to_text(item) + DELIMITER for item in items)


def decode(blob: str | bytes) -> list[str]:
    """Split a line-delimited blob into its values. Exactly one trailing
    delimiter is removed first, so `decode(encode(x)) == x` holds even when
    `x` ends with (or consists of) empty strings.

    Bytes are decoded as UTF-8; invalid sequences become U+FFFD rather than
    failing the read."""
    if isinstance(blob, bytes):
        blob = blob.decode('utf-8', errors='replace')
    if not blob:
        return []
    if blob.endswith(DELIMITER):
        blob = blob[:-len(DELIMITER)]
    return blob.split(DELIMITER)
