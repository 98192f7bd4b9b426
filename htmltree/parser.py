from . import _tokenizer
from . import treebuilder

from ._utils import MethodDispatcher
from ._tokenizer import Characters, SpaceCharacters, StartTag, EndTag
from ._tokenizer import Comment, Doctype, ParseErrorToken
from .constants import spaceCharacters, ParseError, NestingTooDeep
from .settings import LoadSettings

spaceCharacters = "".join(spaceCharacters)


def parse(doc, settings=None, encoding=None, strict=False):
    """Parse a string, bytes or file-like object into a tree

    Returns the Document node. A source without any element or text gives a
    Document without children.
    """
    p = HTMLParser(settings, strict=strict)
    return p.parse(doc, encoding=encoding)


class HTMLParser(object):
    """HTML parser. Generates a tree structure from a stream of (possibly
        malformed) HTML

    A single pass over the source pushes and pops elements on the tree
    builder's stack of open elements. Malformed markup is recovered from
    rather than rejected: end tags without a matching open element are
    ignored, an end tag matching an outer element closes everything opened
    inside it, and elements still open at the end of the input are closed
    there. Each recovery is recorded in self.errors as a
    ((line, col), errorcode, datavars) tuple.

    Only an unterminated tag, an unterminated quoted attribute value and
    (when LoadSettings.max_depth is set) excessive nesting raise ParseError.
    """

    def __init__(self, settings=None, strict=False, tree=treebuilder.TreeBuilder,
                 tokenizer=_tokenizer.HTMLTokenizer):
        """
        settings - a LoadSettings value, the defaults are used when None

        strict - raise an exception when a recoverable parse error is
        encountered

        tree - a treebuilder class controlling the type of tree that will be
        returned

        tokenizer - a class that provides a stream of tokens to the treebuilder
        """

        if settings is None:
            settings = LoadSettings()
        elif not isinstance(settings, LoadSettings):
            raise TypeError("settings must be a LoadSettings, not %r" % (settings,))
        self.settings = settings

        # Raise an exception on the first error encountered
        self.strict = strict

        self.tree = tree()
        self.tokenizer_class = tokenizer
        self.tokenizer = None
        self.errors = []

        self.processToken = MethodDispatcher([
            ((Characters, SpaceCharacters), self.processCharacters),
            (StartTag, self.processStartTag),
            (EndTag, self.processEndTag),
            ((Comment, Doctype), self.processComment),
            (ParseErrorToken, self.processParseError),
        ])

    def _parse(self, stream, encoding=None):
        kwargs = {}
        if encoding is not None:
            kwargs["encoding"] = encoding
        self.tokenizer = self.tokenizer_class(
            stream, decodeEntities=self.settings.decode_entities, **kwargs)
        self.reset()
        self.mainLoop()

    def reset(self):
        self.tree.reset()
        self.errors = []
        self.pendingText = []
        self.rootSpace = []

    def mainLoop(self):
        for token in self.tokenizer:
            self.processToken[token.__class__](token)
        self.processEOF()

    def parse(self, stream, encoding=None):
        """Parse a HTML document into a tree

        stream - a str, bytes or a file-like object containing the HTML to be
        parsed

        The optional encoding parameter must be a string that indicates
        the encoding of bytes input. When missing UTF-8 is assumed, unless
        the data starts with a byte order mark.
        """
        self._parse(stream, encoding=encoding)
        return self.tree.getDocument()

    @property
    def documentEncoding(self):
        """Name of the character encoding that was used to decode the input
        stream, or None if that is not determined yet
        """
        if self.tokenizer is None:
            return None
        return self.tokenizer.stream.charEncoding[0].name

    def parseError(self, errorcode, datavars=None, offset=None):
        position = self.tokenizer.stream.position(offset)
        self.errors.append((position, errorcode, datavars or {}))
        if self.strict:
            raise ParseError(errorcode, position, datavars)

    def processParseError(self, token):
        self.parseError(token.data, token.datavars, token.offset)

    def processCharacters(self, token):
        self.pendingText.append(token.data)

    def processComment(self, token):
        # Comments and declarations leave no node and don't split the text
        # around them
        pass

    def flushText(self):
        """Insert the text read since the last tag as a single Text node,
        unless the settings drop it."""
        if not self.pendingText:
            return
        data = "".join(self.pendingText)
        self.pendingText = []

        settings = self.settings
        if settings.strip_layout_whitespace:
            if data.startswith("\n"):
                data = data.lstrip(spaceCharacters)
            elif data[:1] in (" ", "\t") and not data.strip(" \t\n"):
                data = ""
            if "\n" in data:
                data = data.rstrip(spaceCharacters)
        if not data:
            return
        if not data.strip(spaceCharacters):
            if not settings.all_text_separately:
                return
            if self.tree.currentNode is self.tree.document:
                # Kept only once another top-level node follows it
                if self.tree.document.children:
                    self.rootSpace.append(data)
                return
        self.insertRootSpace()
        self.tree.insertText(data)

    def insertRootSpace(self):
        for data in self.rootSpace:
            self.tree.insertText(data)
        self.rootSpace = []

    def processStartTag(self, token):
        self.flushText()
        maxDepth = self.settings.max_depth
        if (maxDepth is not None and not token.self_closing and
                self.tree.depth >= maxDepth):
            raise NestingTooDeep("too-deeply-nested",
                                 self.tokenizer.stream.position(token.offset),
                                 {"name": token.name, "depth": self.tree.depth + 1,
                                  "limit": maxDepth})
        self.insertRootSpace()
        self.tree.insertElement(token)

    def processEndTag(self, token):
        self.flushText()
        implied = self.tree.closeElement(token.name)
        if implied is None:
            self.parseError("unexpected-end-tag", {"name": token.name}, token.offset)
        elif implied:
            self.parseError("end-tag-too-early",
                            {"name": token.name,
                             "implied": ", ".join(node.name for node in implied)},
                            token.offset)

    def processEOF(self):
        self.flushText()
        for node in self.tree.closeAll():
            self.parseError("expected-closing-tag-but-got-eof", {"name": node.name})
