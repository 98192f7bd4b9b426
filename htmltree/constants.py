import string
import gettext
_ = gettext.gettext

EOF = None

E = {
    "expected-tag-name":
        _("Expected tag name. Got '%(data)s' instead; '<' treated as text."),
    "expected-closing-tag-but-got-char":
        _("Expected closing tag. Unexpected character '%(data)s' found; "
          "'</' treated as text."),
    "expected-closing-tag-but-got-right-bracket":
        _("Expected closing tag. Got '>' instead. Ignoring '</>'."),
    "eof-in-tag-name":
        _("Unexpected end of file in the tag name (%(name)s)."),
    "eof-in-tag":
        _("Unexpected end of file in tag (%(name)s). Expected '>'."),
    "eof-in-end-tag":
        _("Unexpected end of file in end tag (%(name)s). Expected '>'."),
    "eof-in-markup-declaration":
        _("Unexpected end of file in markup declaration. Expected '>'."),
    "eof-in-processing-instruction":
        _("Unexpected end of file in processing instruction. Expected '>'."),
    "eof-in-attribute-value-double-quote":
        _("Unexpected end of file in attribute value (\") of %(name)s."),
    "eof-in-attribute-value-single-quote":
        _("Unexpected end of file in attribute value (') of %(name)s."),
    "too-deeply-nested":
        _("Element %(name)s opened at nesting depth %(depth)d, the limit is "
          "%(limit)d."),
    "attributes-in-end-tag":
        _("End tag (%(name)s) contains unexpected attributes. Ignored."),
    "duplicate-attribute":
        _("Duplicate attribute %(name)s on tag; the last value wins."),
    "eof-in-comment":
        _("Unexpected end of file in comment."),
    "unknown-named-entity":
        _("Entity &%(name)s; not recognized. Kept as text."),
    "unexpected-end-tag":
        _("Unexpected end tag (%(name)s). Ignored."),
    "end-tag-too-early":
        _("End tag (%(name)s) seen too early. Implied end tag (%(implied)s)."),
    "expected-closing-tag-but-got-eof":
        _("Unexpected end of file. Expected end tag (%(name)s)."),
}

spaceCharacters = frozenset((
    "\t",
    "\n",
    "\u000C",
    " ",
    "\r"
))

asciiLetters = frozenset(string.ascii_letters)

# Characters that end a tag or attribute name
tagNameEndCharacters = spaceCharacters | frozenset(("/", ">"))
attributeNameEndCharacters = spaceCharacters | frozenset(("=", "/", ">"))
unquotedValueEndCharacters = spaceCharacters | frozenset((">",))

# The only references decoded when LoadSettings.decode_entities is set
entities = {
    "amp;": "&",
    "lt;": "<",
    "gt;": ">",
    "quot;": "\"",
    "#39;": "'",
}

entityNameCharacters = frozenset(string.ascii_letters + string.digits + "#")


class ParseError(Exception):
    """Error in parsed document

    errorcode - key of the message in E
    position - (line, column) of the construct that failed, line counted
    from 1 and column from 0
    datavars - values interpolated into the message
    """

    def __init__(self, errorcode, position=None, datavars=None):
        self.errorcode = errorcode
        self.position = position
        self.datavars = datavars or {}
        message = E.get(errorcode, errorcode) % self.datavars
        if position is not None:
            message = "Line: %i Col: %i %s" % (position[0], position[1], message)
        super(ParseError, self).__init__(message)


class UnterminatedTag(ParseError):
    """A '<' construct reached the end of input before its '>'"""


class UnterminatedAttributeValue(ParseError):
    """A quoted attribute value reached the end of input before its quote"""


class NestingTooDeep(ParseError):
    """More elements were open at once than LoadSettings.max_depth allows"""


class SerializeError(Exception):
    """Error in serialized tree"""


class DataLossWarning(UserWarning):
    pass
