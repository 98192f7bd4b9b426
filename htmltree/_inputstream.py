import bisect
import re

import webencodings

from .constants import EOF

# Cache for charsUntil()
charsUntilRegEx = {}

newlineRegEx = re.compile("\n")


def lookupEncoding(encoding):
    """Return the webencodings Encoding object for an encoding label, or None
    if the label is not recognised."""
    if isinstance(encoding, bytes):
        try:
            encoding = encoding.decode("ascii")
        except UnicodeDecodeError:
            return None

    if encoding is not None:
        return webencodings.lookup(encoding)
    return None


def HTMLInputStream(source, encoding=None):
    if hasattr(source, "read"):
        source = source.read()

    if isinstance(source, str):
        if encoding is not None:
            raise TypeError("Cannot set an encoding with a unicode input, set one when decoding")
        return HTMLUnicodeInputStream(source)
    elif isinstance(source, (bytes, bytearray, memoryview)):
        return HTMLBinaryInputStream(source, encoding)
    else:
        raise TypeError("Expected str, bytes or a file-like object, not %s" %
                        type(source).__name__)


class HTMLUnicodeInputStream(object):
    """Provides a unicode stream of characters to the HTMLTokenizer.

    The whole source is held in memory; the tokenizer moves an offset over
    it and may step back with unget(). Line and column are looked up from a
    table of line start offsets, built the first time a position is asked
    for.
    """

    def __init__(self, source):
        self.charEncoding = (lookupEncoding("utf-8"), "certain")
        self.data = source
        self.reset()

    def reset(self):
        self.offset = 0
        self.length = len(self.data)
        self.lineStarts = None

    def tell(self):
        return self.offset

    def position(self, offset=None):
        """Returns (line, col) of the given offset, or of the current
        position in the stream."""
        if offset is None:
            offset = self.offset
        if self.lineStarts is None:
            self.lineStarts = [0]
            self.lineStarts.extend(m.end() for m in newlineRegEx.finditer(self.data))
        line = bisect.bisect_right(self.lineStarts, offset)
        return (line, offset - self.lineStarts[line - 1])

    def char(self):
        """ Read one character from the stream. Return EOF when EOF is
            reached.
        """
        offset = self.offset
        if offset >= self.length:
            return EOF
        self.offset = offset + 1
        return self.data[offset]

    def charsUntil(self, characters, opposite=False):
        """ Returns a string of characters from the stream up to but not
        including any character in 'characters' or EOF. 'characters' must be
        a container that supports the 'in' method and iteration over its
        characters. With opposite, returns the characters that are in
        'characters' instead.
        """

        # Use a cache of regexps to find the required characters
        try:
            chars = charsUntilRegEx[(characters, opposite)]
        except KeyError:
            if __debug__:
                for c in characters:
                    assert(ord(c) < 128)
            regex = "".join(["\\x%02x" % ord(c) for c in sorted(characters)])
            if not opposite:
                regex = "^%s" % regex
            chars = charsUntilRegEx[(characters, opposite)] = re.compile("[%s]+" % regex)

        m = chars.match(self.data, self.offset)
        if m is None:
            return ""
        self.offset = m.end()
        return m.group()

    def startswith(self, prefix, ignoreCase=False):
        """Return True if the unread part of the stream starts with prefix.
        Nothing is consumed."""
        candidate = self.data[self.offset:self.offset + len(prefix)]
        if ignoreCase:
            return candidate.lower() == prefix.lower()
        return candidate == prefix

    def skip(self, count):
        self.offset = min(self.offset + count, self.length)

    def find(self, needle):
        """Offset of the next occurrence of needle, or -1. Nothing is
        consumed."""
        return self.data.find(needle, self.offset)

    def unget(self, chars):
        # Any number of characters may be pushed back, but they must be the
        # characters that were just read
        if chars is not EOF and chars:
            self.offset -= len(chars)
            assert self.offset >= 0
            assert self.data.startswith(chars, self.offset)


class HTMLBinaryInputStream(HTMLUnicodeInputStream):
    """Provides a unicode stream of characters decoded from bytes.

    The encoding is the one given by the caller, falling back to UTF-8. A
    byte order mark at the start of the data takes precedence, which is how
    the WHATWG decode algorithm treats it. No other detection is done.
    """

    def __init__(self, source, encoding=None):
        if encoding is None:
            fallback = lookupEncoding("utf-8")
            confidence = "tentative"
        else:
            fallback = lookupEncoding(encoding)
            confidence = "certain"
            if fallback is None:
                raise LookupError("Unknown encoding label: %r" % (encoding,))

        text, used = webencodings.decode(bytes(source), fallback)
        if used is not fallback:
            confidence = "certain"
        self.data = text
        self.charEncoding = (used, confidence)
        self.reset()
