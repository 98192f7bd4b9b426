import warnings

from .constants import SerializeError, DataLossWarning
from .constants import tagNameEndCharacters, attributeNameEndCharacters
from .treewalker import TreeWalker
from ._inputstream import lookupEncoding


def serialize(input, encoding=None, **serializer_opts):
    """Serialize a node and its descendants back to markup

    Returns a str, or bytes when an encoding is given. See HTMLSerializer
    for the options.
    """
    walker = TreeWalker(input)
    s = HTMLSerializer(**serializer_opts)
    return s.render(walker, encoding)


class HTMLSerializer(object):

    # attribute quoting options
    quote_char = '"'
    use_best_quote_char = True

    # tag syntax options
    minimize_bare_attributes = True
    space_before_trailing_solidus = False

    # escaping options
    escape_text = False

    # miscellaneous options
    strip_whitespace = False
    alphabetical_attributes = False
    strict = False

    options = ("quote_char", "use_best_quote_char", "minimize_bare_attributes",
               "space_before_trailing_solidus", "escape_text",
               "strip_whitespace", "alphabetical_attributes", "strict")

    def __init__(self, **kwargs):
        """Initialize HTMLSerializer.

        Keyword options (default given first unless specified) include:

        quote_char='"'|"'"
          Use given quote character for attribute quoting. Default is to
          use double quote unless attribute value contains a double quote,
          in which case single quotes are used instead.
        use_best_quote_char=True|False
          Pick the quote character that doesn't occur in the value. Turned
          off when quote_char is given explicitly.
        minimize_bare_attributes=True|False
          Write attributes without value tokens as a bare name, <input
          disabled>, rather than <input disabled="">.
        space_before_trailing_solidus=False|True
          Places a space immediately before the closing slash of a tag
          written self-closing. E.g. <br />.
        escape_text=False|True
          Escape & < and > in text and & in attribute values. Use this for
          trees parsed with decode_entities; by default text is written back
          exactly as it was read.
        strip_whitespace=False|True
          Whether to remove semantically meaningless whitespace. (This
          compresses all whitespace to a single space except within pre.)
        alphabetical_attributes=False|True
          Write the attributes of each tag sorted by name.
        strict=False|True
          Raise SerializeError on the first problem instead of recording it
          in self.errors.
        """
        unexpected_args = frozenset(kwargs) - frozenset(self.options)
        if len(unexpected_args) > 0:
            raise TypeError("__init__() got an unexpected keyword argument '%s'" % next(iter(unexpected_args)))
        if 'quote_char' in kwargs:
            self.use_best_quote_char = False
        for attr in self.options:
            setattr(self, attr, kwargs.get(attr, getattr(self, attr)))
        if self.quote_char not in ("'", '"'):
            raise ValueError("quote_char must be ' or \"")
        self.errors = []
        self.encoding = None

    def encode(self, string):
        assert(isinstance(string, str))
        if self.encoding:
            return string.encode(self.encoding.codec_info.name, "xmlcharrefreplace")
        else:
            return string

    def encodeStrict(self, string):
        assert(isinstance(string, str))
        if self.encoding:
            return string.encode(self.encoding.codec_info.name, "strict")
        else:
            return string

    def serialize(self, treewalker, encoding=None):
        if encoding:
            self.encoding = lookupEncoding(encoding)
            if self.encoding is None:
                raise LookupError("Unknown encoding label: %r" % (encoding,))
        else:
            self.encoding = None
        self.errors = []
        if self.strip_whitespace:
            from .filters.whitespace import Filter
            treewalker = Filter(treewalker)
        if self.alphabetical_attributes:
            from .filters.alphabeticalattributes import Filter
            treewalker = Filter(treewalker)

        for token in treewalker:
            type = token["type"]
            if type in ("Characters", "SpaceCharacters"):
                data = token["data"]
                if type == "Characters" and self.escape_text:
                    data = data.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
                yield self.encode(data)

            elif type in ("StartTag", "EmptyTag"):
                name = token["name"]
                if any(c in tagNameEndCharacters for c in name):
                    self.serializeError("Invalid tag name %r" % name)
                yield self.encodeStrict("<%s" % name)
                for k, values in token["data"]:
                    if any(c in attributeNameEndCharacters for c in k):
                        self.serializeError("Invalid attribute name %r" % k)
                    yield self.encodeStrict(" ")
                    yield self.encodeStrict(k)
                    if values or not self.minimize_bare_attributes:
                        yield self.encodeStrict("=")
                        for part in self.attributeValue(k, " ".join(values)):
                            yield self.encode(part)
                if type == "EmptyTag":
                    if self.space_before_trailing_solidus:
                        yield self.encodeStrict(" /")
                    else:
                        yield self.encodeStrict("/")
                yield self.encode(">")

            elif type == "EndTag":
                if not token.get("implied"):
                    yield self.encodeStrict("</%s>" % token["name"])

            else:
                self.serializeError(token.get("data", "Unknown token type: %s" % type))

    def attributeValue(self, name, v):
        if self.escape_text:
            v = v.replace("&", "&amp;")
        quote_char = self.quote_char
        if self.use_best_quote_char:
            if "'" in v and '"' not in v:
                quote_char = '"'
            elif '"' in v and "'" not in v:
                quote_char = "'"
        if quote_char in v:
            if not self.escape_text:
                warnings.warn("Value of attribute %s contains the quote character %s; "
                              "it is escaped and won't be decoded on reparse" % (name, quote_char),
                              DataLossWarning)
            if quote_char == "'":
                v = v.replace("'", "&#39;")
            else:
                v = v.replace('"', "&quot;")
        return quote_char, v, quote_char

    def render(self, treewalker, encoding=None):
        """Serializes the stream from the treewalker into a string

        treewalker - the treewalker to serialize
        encoding - the string encoding to use, bytes are returned when given
        """
        if encoding:
            return b"".join(list(self.serialize(treewalker, encoding)))
        else:
            return "".join(list(self.serialize(treewalker)))

    def serializeError(self, data):
        self.errors.append(data)
        if self.strict:
            raise SerializeError(data)
