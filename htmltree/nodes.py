"""The node tree produced by the parser.

A node is either an Element or a Text; the two classes share no base class
and both answer the same read accessors (tag_name, text, children,
attributes), so code walking a tree never needs to test for the variant
before reading. The root of a parse is a Document, an Element without a tag
name whose children are the top-level nodes of the source.

Children are owned by their parent and there are no references back from a
child to its parent, so a tree can't contain cycles.
"""

import re

from .constants import spaceCharacters

_spaceSplit = re.compile("[%s]+" % "".join(sorted(spaceCharacters)))


def split_attribute_value(raw):
    """Split a raw attribute value into its whitespace separated tokens,
    dropping empty ones.

    Only the HTML space characters (tab, line feed, form feed, carriage
    return and space) separate tokens. Other Unicode whitespace, such as a
    vertical tab or a no-break space, stays inside its token.
    """
    return [value for value in _spaceSplit.split(raw) if value]


def join_attribute_value(values):
    return " ".join(values)


def _attributeTokens(values):
    if isinstance(values, str):
        return split_attribute_value(values)
    values = list(values)
    for value in values:
        if not isinstance(value, str):
            raise TypeError("attribute values must be strings, not %r" % (value,))
        if not value or _spaceSplit.search(value):
            raise ValueError("attribute value token %r is empty or contains whitespace" % (value,))
    return values


def _iterTree(node, includeSelf):
    # Pre-order with an explicit stack so deep trees don't exhaust the
    # interpreter's recursion limit
    if includeSelf:
        yield node
    stack = [iter(node.children)]
    while stack:
        child = next(stack[-1], None)
        if child is None:
            stack.pop()
            continue
        yield child
        if child.children:
            stack.append(iter(child.children))


class Text(object):
    """A run of literal text. Text nodes never have children."""

    __slots__ = ("value",)

    tag_name = None
    children = ()

    def __init__(self, value):
        self.value = value

    def __repr__(self):
        return "<Text %r>" % (self.value,)

    @property
    def text(self):
        return self.value

    @property
    def attributes(self):
        return {}

    def __iter__(self):
        return iter(())

    def search(self, predicate):
        if predicate(None, {}):
            yield self

    def fetch(self, key=None, value=None, value_part=None):
        return iter(())

    def getElementsByTagName(self, name):
        return iter(())

    def hasContent(self):
        return bool(self.value)

    def cloneNode(self):
        return Text(self.value)

    def printTree(self, indent=0):
        return '|%s"%s"' % (" " * indent, self.value)

    def toHtml(self, **options):
        from .serializer import serialize
        return serialize(self, **options)


class Element(object):
    """An element: tag name, attributes and an ordered list of children.

    name - the tag name as written in the source
    attributes - dict of attribute name to a list of value tokens
    children - list of Element and Text nodes in document order
    self_closing - the element was written as <name/>
    closed - False for an element the parser left open, one whose end tag
    never appeared in the source
    """

    def __init__(self, name, attributes=None, self_closing=False):
        if not name:
            raise ValueError("an element needs a tag name")
        self.name = name
        self.attributes = {}
        for key, values in (attributes or {}).items():
            self.attributes[key] = _attributeTokens(values)
        self.children = []
        self.self_closing = self_closing
        self.closed = True

    def __repr__(self):
        return "<%s>" % (self.name)

    def __iter__(self):
        return _iterTree(self, False)

    @property
    def tag_name(self):
        return self.name

    @property
    def text(self):
        return None

    def appendChild(self, node):
        """Insert node as the last child of the current node. Adjacent Text
        children are not merged."""
        if not isinstance(node, (Element, Text)) or isinstance(node, Document):
            raise TypeError("only Element and Text nodes can be children, not %r" % (node,))
        self.children.append(node)

    def insertBefore(self, node, refNode):
        """Insert node as a child of the current node, before refNode in the
        list of child nodes. Raises ValueError if refNode is not a child of
        the current node"""
        if not isinstance(node, (Element, Text)) or isinstance(node, Document):
            raise TypeError("only Element and Text nodes can be children, not %r" % (node,))
        for index, child in enumerate(self.children):
            if child is refNode:
                self.children.insert(index, node)
                return
        raise ValueError("%r is not a child of %r" % (refNode, self))

    def removeChild(self, node):
        for index, child in enumerate(self.children):
            if child is node:
                del self.children[index]
                return
        raise ValueError("%r is not a child of %r" % (node, self))

    def hasContent(self):
        """Return true if the node has children, false otherwise"""
        return bool(self.children)

    def cloneNode(self):
        """Return a shallow copy of the current node i.e. a node with the same
        name and attributes but with no child nodes"""
        node = Element(self.name, self.attributes, self.self_closing)
        node.closed = self.closed
        return node

    def rename(self, name):
        if not name:
            raise ValueError("an element needs a tag name")
        self.name = name

    # Attributes

    def getAttribute(self, name):
        """The value of attribute name as a single string, or None"""
        values = self.attributes.get(name)
        if values is None:
            return None
        return join_attribute_value(values)

    def getAttributeValues(self, name):
        return self.attributes.get(name)

    def putAttribute(self, name, values=()):
        """Add a new attribute. values may be a string, split on whitespace,
        or a sequence of tokens. Raises KeyError if the attribute exists."""
        if name in self.attributes:
            raise KeyError(name)
        self.overwriteAttribute(name, values)

    def overwriteAttribute(self, name, values=()):
        if not name:
            raise ValueError("an attribute needs a name")
        self.attributes[name] = _attributeTokens(values)

    # Searching

    def search(self, predicate):
        """Yield this node and its descendants, parent before children and
        children in document order, for which predicate(tag_name, attributes)
        is true."""
        for node in _iterTree(self, True):
            if predicate(node.tag_name, node.attributes):
                yield node

    def fetch(self, key=None, value=None, value_part=None):
        """Yield the descendant elements with a matching attribute.

        key - the attribute must be present; without a key any attribute of
        the element can satisfy the value criteria
        value - the whole attribute value must be equal to this string
        value_part - one of the attribute's tokens must be equal to this
        string; ignored when value is given
        """
        def matches(values):
            if value is not None:
                return join_attribute_value(values) == value
            if value_part is not None:
                return value_part in values
            return True

        for node in _iterTree(self, False):
            if node.text is not None:
                continue
            if key is not None:
                if key in node.attributes and matches(node.attributes[key]):
                    yield node
            elif any(matches(values) for values in node.attributes.values()):
                yield node

    def getElementsByTagName(self, name):
        return (node for node in _iterTree(self, False)
                if node.text is None and node.tag_name == name)

    # Output

    def printTree(self, indent=0):
        """Return an indented dump of the tree, one line per node and per
        attribute, attributes sorted by name."""
        lines = []
        stack = [(self, indent)]
        while stack:
            node, depth = stack.pop()
            if node.text is not None:
                lines.append(node.printTree(depth))
                continue
            if node.tag_name is not None:
                lines.append("|%s<%s>" % (" " * depth, node.tag_name))
                depth += 2
                for name, values in sorted(node.attributes.items()):
                    lines.append('|%s%s="%s"' % (" " * depth, name,
                                                  join_attribute_value(values)))
            else:
                lines.append(str(node))
                depth += 2
            for child in reversed(node.children):
                stack.append((child, depth))
        return "\n".join(lines)

    def toHtml(self, **options):
        from .serializer import serialize
        return serialize(self, **options)


class Document(Element):
    """The synthetic root of a parse. It has no tag name and no attributes."""

    def __init__(self):
        self.name = None
        self.attributes = {}
        self.children = []
        self.self_closing = False
        self.closed = True

    def __str__(self):
        return "#document"

    def __repr__(self):
        return "<#document>"

    def cloneNode(self):
        return Document()

    def rename(self, name):
        raise TypeError("the document node has no tag name")

    def overwriteAttribute(self, name, values=()):
        raise TypeError("the document node has no attributes")
