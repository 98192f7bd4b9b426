"""
HTML parsing library producing a light node tree.

Example usage::

    import htmltree
    with open("my_document.html", "rb") as f:
        document = htmltree.parse(f)

    div = document.children[0]
    for link in div.fetch(key="class", value_part="external"):
        print(link.getAttribute("href"))

    print(htmltree.serialize(document))

The parser is lenient: unclosed and mismatched tags are recovered from, and
only unterminated tags or quoted attribute values make parse() raise
ParseError.
"""

from .parser import HTMLParser, parse
from .settings import LoadSettings
from .nodes import Document, Element, Text
from .nodes import split_attribute_value, join_attribute_value
from .treewalker import TreeWalker
from .serializer import HTMLSerializer, serialize
from .constants import ParseError, UnterminatedTag, UnterminatedAttributeValue
from .constants import NestingTooDeep, SerializeError, DataLossWarning

__all__ = ["HTMLParser", "parse", "LoadSettings",
           "Document", "Element", "Text",
           "split_attribute_value", "join_attribute_value",
           "TreeWalker", "HTMLSerializer", "serialize",
           "ParseError", "UnterminatedTag", "UnterminatedAttributeValue",
           "NestingTooDeep", "SerializeError", "DataLossWarning"]

__version__ = "0.1.0"
