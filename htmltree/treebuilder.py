from .nodes import Document, Element, Text


class TreeBuilder(object):
    """Builds the node tree from the parser's instructions.

    documentClass - the class to use for the bottommost node of a document
    elementClass - the class to use for elements
    textClass - the class to use for text nodes

    openElements is the stack of elements whose end tag hasn't been seen
    yet. It always starts with the document node, which is never popped.
    openCounts maps a tag name to the number of open elements with that
    name, so an end tag matching nothing is rejected without a scan.
    """

    documentClass = Document
    elementClass = Element
    textClass = Text

    def __init__(self):
        self.reset()

    def reset(self):
        self.document = self.documentClass()
        self.openElements = [self.document]
        self.openCounts = {}

    @property
    def currentNode(self):
        return self.openElements[-1]

    @property
    def depth(self):
        """Number of open elements, not counting the document"""
        return len(self.openElements) - 1

    def insertElement(self, token):
        """Create an element for a start tag token, append it to the current
        node and, unless it is self-closing, make it the current node."""
        element = self.elementClass(token.name, token.attributes, token.self_closing)
        self.currentNode.appendChild(element)
        if not token.self_closing:
            element.closed = False
            self.openElements.append(element)
            self.openCounts[element.name] = self.openCounts.get(element.name, 0) + 1
        return element

    def insertText(self, data):
        self.currentNode.appendChild(self.textClass(data))

    def closeElement(self, name):
        """Pop open elements up to and including the innermost one called
        name and mark it closed.

        Returns the elements that were closed implicitly on the way, innermost
        first, or None when no open element has that name and nothing was
        popped."""
        if not self.openCounts.get(name):
            return None
        implied = []
        node = self.popElement()
        while node.name != name:
            implied.append(node)
            node = self.popElement()
        node.closed = True
        return implied

    def closeAll(self):
        """Pop every open element, innermost first, and return them. They
        stay marked as not closed."""
        implied = []
        while len(self.openElements) > 1:
            implied.append(self.popElement())
        return implied

    def popElement(self):
        node = self.openElements.pop()
        self.openCounts[node.name] -= 1
        return node

    def getDocument(self):
        "Return the final tree"
        return self.document

    def testSerializer(self, node):
        """Serialize the subtree of node in the format required by unit tests
        node - the node from which to start serializing"""
        return node.printTree()
