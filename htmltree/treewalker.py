# Copyright (c) 2006-2013 James Graham and other contributors
#
# Permission is hereby granted, free of charge, to any person obtaining
# a copy of this software and associated documentation files (the
# "Software"), to deal in the Software without restriction, including
# without limitation the rights to use, copy, modify, merge, publish,
# distribute, sublicense, and/or sell copies of the Software, and to
# permit persons to whom the Software is furnished to do so, subject to
# the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS BE
# LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN ACTION
# OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN CONNECTION
# WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE SOFTWARE.

"""Walk a node tree and generate the token stream read by the serializer.

Tokens are dicts with a "type" key:

- {"type": "StartTag", "name": name, "data": [(attr, values), ...]}
- {"type": "EmptyTag", "name": name, "data": [(attr, values), ...]}
- {"type": "EndTag", "name": name, "implied": implied}
- {"type": "Characters", "data": text}
- {"type": "SpaceCharacters", "data": whitespace}
"""

from .constants import spaceCharacters

__all__ = ["TreeWalker"]

spaceCharacters = "".join(spaceCharacters)


class TreeWalker(object):
    """Iterate over the tokens of a tree, the node itself included.

    An element that was written as <name/> and has no children gives an
    EmptyTag token. Every StartTag is matched by an EndTag; the EndTag of
    an element left open in the source is marked "implied" when the element
    is the last child of its parent, and the serializer writes nothing for
    it. Markup produced from the tokens then nests exactly like the tree.
    """

    def __init__(self, tree):
        self.tree = tree

    def __iter__(self):
        # Each entry is an element, the iterator over its children and
        # whether its end tag is implied
        stack = []
        for token in self.enter(self.tree, True, stack):
            yield token
        while stack:
            element, children, implied = stack[-1]
            child = next(children, None)
            if child is None:
                stack.pop()
                if implied is not None:
                    yield self.endTag(element.name, implied)
                continue
            for token in self.enter(child, child is element.children[-1], stack):
                yield token

    def enter(self, node, isLast, stack):
        if node.text is not None:
            for token in self.text(node.text):
                yield token
        elif node.tag_name is None:
            stack.append((node, iter(node.children), None))
        elif node.self_closing and not node.children:
            yield self.emptyTag(node.name, self.attributes(node))
        else:
            yield self.startTag(node.name, self.attributes(node))
            implied = not node.closed and isLast
            stack.append((node, iter(node.children), implied))

    def attributes(self, node):
        return [(name, list(values)) for name, values in node.attributes.items()]

    def emptyTag(self, name, attrs):
        return {"type": "EmptyTag", "name": name, "data": attrs}

    def startTag(self, name, attrs):
        return {"type": "StartTag",
                "name": name,
                "data": attrs}

    def endTag(self, name, implied=False):
        return {"type": "EndTag",
                "name": name,
                "implied": implied}

    def text(self, data):
        middle = data.lstrip(spaceCharacters)
        left = data[:len(data) - len(middle)]
        if left:
            yield {"type": "SpaceCharacters", "data": left}
        data = middle
        middle = data.rstrip(spaceCharacters)
        right = data[len(middle):]
        if middle:
            yield {"type": "Characters", "data": middle}
        if right:
            yield {"type": "SpaceCharacters", "data": right}
