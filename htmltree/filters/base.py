class Filter(object):
    """Wraps a token stream, such as a TreeWalker, and yields its tokens.

    Subclasses override __iter__ to rewrite tokens on their way to the
    serializer. Tokens are the dicts described in htmltree.treewalker;
    filters may change their data in place but must keep StartTag and EndTag
    tokens balanced, since the whitespace filter counts them.
    """

    def __init__(self, source):
        self.source = source

    def __iter__(self):
        return iter(self.source)

    def __getattr__(self, name):
        return getattr(self.source, name)
