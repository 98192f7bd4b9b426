from collections import deque

from .constants import spaceCharacters, asciiLetters, EOF
from .constants import tagNameEndCharacters, attributeNameEndCharacters
from .constants import unquotedValueEndCharacters
from .constants import entities, entityNameCharacters
from .constants import UnterminatedTag, UnterminatedAttributeValue

from ._inputstream import HTMLInputStream


class Token(object):
    def __init__(self, data=None):
        self.data = data
        self.offset = None


class Doctype(Token):
    pass


class Characters(Token):
    pass


class SpaceCharacters(Token):
    pass


class Tag(Token):
    def __init__(self, name, attributes=None):
        self.name = name
        self.offset = None
        self.attributes = dict(attributes or {})
        self.duplicates = []
        self.self_closing = False
        self.attribute_name = ""
        self.attribute_value = ""

    def clearAttribute(self):
        if self.attribute_name:
            if self.attribute_name in self.attributes:
                self.duplicates.append(self.attribute_name)
            self.attributes[self.attribute_name] = self.attribute_value
        self.attribute_name = ""
        self.attribute_value = ""

    def accumulateAttributeName(self, text):
        self.attribute_name += text

    def accumulateAttributeValue(self, text):
        self.attribute_value += text


class StartTag(Tag):
    pass


class EndTag(Tag):
    pass


class Comment(Token):
    pass


class ParseErrorToken(Token):
    """A recoverable irregularity. Fatal ones are raised instead."""

    def __init__(self, data, datavars=None):
        self.data = data
        self.datavars = datavars or {}
        self.offset = None


class HTMLTokenizer(object):
    """ This class takes care of tokenizing HTML.

    * self.currentToken
      Holds the token that is currently being processed.

    * self.state
      Holds a reference to the method to be invoked for the next character.
      Each state returns False once the end of the input is reached.

    * self.stream
      Points to HTMLInputStream object.

    * self.tokenStart
      Offset of the '<' that opened the construct being read, used to report
      where an unterminated construct began.
    """

    def __init__(self, stream, decodeEntities=False, **kwargs):

        self.stream = HTMLInputStream(stream, **kwargs)
        self.decodeEntities = decodeEntities

        if decodeEntities:
            self.dataStopCharacters = frozenset(("<", "&"))
        else:
            self.dataStopCharacters = frozenset(("<",))
        self.doubleQuotedStopCharacters = frozenset(("\"",)) | (self.dataStopCharacters - {"<"})
        self.singleQuotedStopCharacters = frozenset(("'",)) | (self.dataStopCharacters - {"<"})
        self.unquotedStopCharacters = unquotedValueEndCharacters | (self.dataStopCharacters - {"<"})

        # Setup the initial tokenizer state
        self.state = self.dataState

        # The current token being created
        self.currentToken = None
        self.tokenStart = 0
        self.valueStart = 0
        super(HTMLTokenizer, self).__init__()

    def __iter__(self):
        """ This is where the magic happens.

        We do our usually processing through the states and when we have a token
        to return we yield the token which pauses processing until the next token
        is requested.
        """
        self.tokenQueue = deque([])
        # Start processing. When EOF is reached self.state will return False
        # instead of True and the loop will terminate.
        while self.state():
            while self.tokenQueue:
                yield self.tokenQueue.popleft()
        while self.tokenQueue:
            yield self.tokenQueue.popleft()

    def emit(self, token, offset=None):
        if offset is None:
            offset = self.tokenStart
        token.offset = offset
        self.tokenQueue.append(token)

    def parseError(self, errorcode, datavars=None, offset=None):
        self.emit(ParseErrorToken(errorcode, datavars), offset)

    def position(self, offset):
        return self.stream.position(offset)

    def unterminatedTag(self, errorcode):
        name = getattr(self.currentToken, "name", "")
        raise UnterminatedTag(errorcode, self.position(self.tokenStart),
                              {"name": name})

    def consumeEntity(self, fromAttribute=False):
        """Decode one of the references in constants.entities. Anything else
        is left in place, starting with the '&' itself."""
        start = self.stream.tell() - 1
        name = self.stream.charsUntil(entityNameCharacters, True)
        c = self.stream.char()
        if c == ";" and name + ";" in entities:
            output = entities[name + ";"]
        else:
            if c == ";" and name:
                self.parseError("unknown-named-entity", {"name": name}, start)
            self.stream.unget(c)
            self.stream.unget(name)
            output = "&"

        if fromAttribute:
            self.currentToken.accumulateAttributeValue(output)
        else:
            self.emit(Characters(output), start)

    def emitCurrentToken(self):
        """This method is a generic handler for emitting the tags. It also sets
        the state to "data" because that's what's needed after a token has been
        emitted.
        """
        token = self.currentToken
        token.clearAttribute()
        if isinstance(token, EndTag):
            if token.attributes:
                self.parseError("attributes-in-end-tag", {"name": token.name})
        else:
            for name in token.duplicates:
                self.parseError("duplicate-attribute", {"name": name})
        self.emit(token)
        self.currentToken = None
        self.state = self.dataState

    # Below are the various tokenizer states worked out.
    def dataState(self):
        offset = self.stream.tell()
        data = self.stream.char()
        if data == "<":
            self.tokenStart = offset
            self.state = self.tagOpenState
        elif data == "&" and self.decodeEntities:
            self.consumeEntity()
        elif data is EOF:
            # Tokenization ends.
            return False
        elif data in spaceCharacters:
            # Whitespace directly after a tag is emitted separately so the
            # parser can tell whitespace-only runs apart
            self.emit(SpaceCharacters(data + self.stream.charsUntil(spaceCharacters, True)),
                      offset)
        else:
            chars = self.stream.charsUntil(self.dataStopCharacters)
            self.emit(Characters(data + chars), offset)
        return True

    def tagOpenState(self):
        data = self.stream.char()
        if data == "!":
            self.state = self.markupDeclarationOpenState
        elif data == "/":
            self.state = self.closeTagOpenState
        elif data == "?":
            self.state = self.processingInstructionState
        elif data in asciiLetters:
            self.currentToken = StartTag(name=data)
            self.state = self.tagNameState
        else:
            # A stray '<' is text
            self.parseError("expected-tag-name",
                            {"data": "end of file" if data is EOF else data})
            self.emit(Characters("<"))
            self.stream.unget(data)
            self.state = self.dataState
        return True

    def closeTagOpenState(self):
        data = self.stream.char()
        if data in asciiLetters:
            self.currentToken = EndTag(name=data)
            self.state = self.tagNameState
        elif data == ">":
            self.parseError("expected-closing-tag-but-got-right-bracket")
            self.state = self.dataState
        else:
            self.parseError("expected-closing-tag-but-got-char",
                            {"data": "end of file" if data is EOF else data})
            self.emit(Characters("</"))
            self.stream.unget(data)
            self.state = self.dataState
        return True

    def tagNameState(self):
        self.currentToken.name += self.stream.charsUntil(tagNameEndCharacters)
        data = self.stream.char()
        if data in spaceCharacters:
            self.state = self.beforeAttributeNameState
        elif data == ">":
            self.emitCurrentToken()
        elif data == "/":
            self.state = self.selfClosingStartTagState
        else:
            assert data is EOF
            self.unterminatedTag("eof-in-tag-name")
        return True

    def beforeAttributeNameState(self):
        data = self.stream.char()
        if data in spaceCharacters:
            self.stream.charsUntil(spaceCharacters, True)
        elif data == ">":
            self.emitCurrentToken()
        elif data == "/":
            self.state = self.selfClosingStartTagState
        elif data is EOF:
            self.unterminatedTag(self.eofInTag())
        else:
            self.currentToken.clearAttribute()
            self.currentToken.accumulateAttributeName(data)
            self.state = self.attributeNameState
        return True

    def attributeNameState(self):
        self.currentToken.accumulateAttributeName(
            self.stream.charsUntil(attributeNameEndCharacters))
        data = self.stream.char()
        if data == "=":
            self.state = self.beforeAttributeValueState
        elif data == ">":
            self.emitCurrentToken()
        elif data in spaceCharacters:
            self.state = self.afterAttributeNameState
        elif data == "/":
            self.state = self.selfClosingStartTagState
        else:
            assert data is EOF
            self.unterminatedTag(self.eofInTag())
        return True

    def afterAttributeNameState(self):
        data = self.stream.char()
        if data in spaceCharacters:
            self.stream.charsUntil(spaceCharacters, True)
        elif data == "=":
            self.state = self.beforeAttributeValueState
        elif data == ">":
            self.emitCurrentToken()
        elif data == "/":
            self.state = self.selfClosingStartTagState
        elif data is EOF:
            self.unterminatedTag(self.eofInTag())
        else:
            self.currentToken.clearAttribute()
            self.currentToken.accumulateAttributeName(data)
            self.state = self.attributeNameState
        return True

    def beforeAttributeValueState(self):
        data = self.stream.char()
        if data in spaceCharacters:
            self.stream.charsUntil(spaceCharacters, True)
        elif data == "\"":
            self.valueStart = self.stream.tell() - 1
            self.state = self.attributeValueDoubleQuotedState
        elif data == "'":
            self.valueStart = self.stream.tell() - 1
            self.state = self.attributeValueSingleQuotedState
        elif data == ">":
            self.emitCurrentToken()
        elif data is EOF:
            self.unterminatedTag(self.eofInTag())
        else:
            self.stream.unget(data)
            self.state = self.attributeValueUnQuotedState
        return True

    def attributeValueDoubleQuotedState(self):
        self.currentToken.accumulateAttributeValue(
            self.stream.charsUntil(self.doubleQuotedStopCharacters))
        data = self.stream.char()
        if data == "\"":
            self.state = self.afterAttributeValueState
        elif data == "&":
            self.consumeEntity(fromAttribute=True)
        else:
            assert data is EOF
            self.unterminatedAttributeValue("eof-in-attribute-value-double-quote")
        return True

    def attributeValueSingleQuotedState(self):
        self.currentToken.accumulateAttributeValue(
            self.stream.charsUntil(self.singleQuotedStopCharacters))
        data = self.stream.char()
        if data == "'":
            self.state = self.afterAttributeValueState
        elif data == "&":
            self.consumeEntity(fromAttribute=True)
        else:
            assert data is EOF
            self.unterminatedAttributeValue("eof-in-attribute-value-single-quote")
        return True

    def attributeValueUnQuotedState(self):
        self.currentToken.accumulateAttributeValue(
            self.stream.charsUntil(self.unquotedStopCharacters))
        data = self.stream.char()
        if data in spaceCharacters:
            self.state = self.beforeAttributeNameState
        elif data == ">":
            self.emitCurrentToken()
        elif data == "&":
            self.consumeEntity(fromAttribute=True)
        else:
            assert data is EOF
            self.unterminatedTag(self.eofInTag())
        return True

    def afterAttributeValueState(self):
        data = self.stream.char()
        if data in spaceCharacters:
            self.state = self.beforeAttributeNameState
        elif data == ">":
            self.emitCurrentToken()
        elif data == "/":
            self.state = self.selfClosingStartTagState
        elif data is EOF:
            self.unterminatedTag(self.eofInTag())
        else:
            self.stream.unget(data)
            self.state = self.beforeAttributeNameState
        return True

    def selfClosingStartTagState(self):
        data = self.stream.char()
        if data == ">":
            self.currentToken.self_closing = True
            self.emitCurrentToken()
        elif data is EOF:
            self.unterminatedTag(self.eofInTag())
        else:
            self.stream.unget(data)
            self.state = self.beforeAttributeNameState
        return True

    def markupDeclarationOpenState(self):
        stream = self.stream
        if stream.startswith("--"):
            stream.skip(2)
            end = stream.find("-->")
            if end == -1:
                self.parseError("eof-in-comment")
                end = stream.length
                self.emit(Comment(stream.data[stream.tell():end]))
                stream.skip(end - stream.tell())
            else:
                self.emit(Comment(stream.data[stream.tell():end]))
                stream.skip(end + 3 - stream.tell())
        elif stream.startswith("[CDATA["):
            end = stream.find("]]>")
            if end == -1:
                self.unterminatedTag("eof-in-markup-declaration")
            self.emit(Comment(stream.data[stream.tell() + 7:end]))
            stream.skip(end + 3 - stream.tell())
        else:
            end = stream.find(">")
            if end == -1:
                self.unterminatedTag("eof-in-markup-declaration")
            if stream.startswith("doctype", ignoreCase=True):
                token = Doctype(stream.data[stream.tell() + 7:end].strip())
            else:
                token = Comment(stream.data[stream.tell():end])
            self.emit(token)
            stream.skip(end + 1 - stream.tell())
        self.state = self.dataState
        return True

    def processingInstructionState(self):
        end = self.stream.find(">")
        if end == -1:
            self.unterminatedTag("eof-in-processing-instruction")
        self.emit(Comment(self.stream.data[self.stream.tell():end]))
        self.stream.skip(end + 1 - self.stream.tell())
        self.state = self.dataState
        return True

    def eofInTag(self):
        if isinstance(self.currentToken, EndTag):
            return "eof-in-end-tag"
        return "eof-in-tag"

    def unterminatedAttributeValue(self, errorcode):
        raise UnterminatedAttributeValue(errorcode, self.position(self.valueStart),
                                         {"name": self.currentToken.attribute_name})
