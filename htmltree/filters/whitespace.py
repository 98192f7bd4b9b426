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

import re

from . import base
from ..constants import spaceCharacters

SPACES_REGEX = re.compile("[%s]+" % "".join(sorted(spaceCharacters)))


class Filter(base.Filter):
    """Collapse layout whitespace in text to single spaces.

    Every whitespace run inside a text token becomes one space, and a run
    split across adjacent text tokens ("a ", "\\n ", " b") is written once.
    Text tokens left empty are dropped. Any tag token ends the run, so the
    space before or after an element is kept. Nothing changes inside the
    elements of preserveElements, compared case-insensitively; EmptyTag
    tokens never open such an element.
    """

    preserveElements = frozenset(["pre", "textarea", "script", "style"])

    def __iter__(self):
        preserveDepth = 0
        afterSpace = False
        for token in base.Filter.__iter__(self):
            type = token["type"]
            if type == "StartTag":
                if preserveDepth or token["name"].lower() in self.preserveElements:
                    preserveDepth += 1
                afterSpace = False
            elif type == "EndTag":
                if preserveDepth:
                    preserveDepth -= 1
                afterSpace = False
            elif type == "EmptyTag":
                afterSpace = False
            elif type in ("Characters", "SpaceCharacters") and not preserveDepth:
                data = collapse_spaces(token["data"])
                if afterSpace and data.startswith(" "):
                    data = data[1:]
                if not data:
                    continue
                afterSpace = data.endswith(" ")
                token["data"] = data
            yield token


def collapse_spaces(text):
    return SPACES_REGEX.sub(" ", text)
