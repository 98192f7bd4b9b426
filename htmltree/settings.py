class LoadSettings(object):
    """Options controlling how a source is turned into a tree.

    Keyword options (default given first) are:

    all_text_separately=True|False
      Keep text runs made only of whitespace inside elements as Text nodes.
      With False they are dropped. Directly inside the document root such a
      run is kept only between two top-level nodes; leading and trailing
      runs are dropped, so an empty or blank source gives a document
      without children. Non-blank runs are always kept, one Text
      node per run of text between two tags.
    decode_entities=False|True
      Decode &amp; &lt; &gt; &quot; and &#39; in text and attribute values.
      Any other reference is left as written.
    strip_layout_whitespace=False|True
      Remove indentation around text: a run starting with a newline loses
      its leading whitespace, a run containing a newline loses its trailing
      whitespace, a blank run starting with a space or tab and holding no
      other whitespace than spaces, tabs and newlines is dropped, and a run
      left empty is dropped.
    max_depth=None|int
      Raise NestingTooDeep when more elements than this are open at once.
      None means no limit.

    Settings are immutable; replace() returns a copy with some options
    changed::

      LoadSettings().replace(all_text_separately=False)
    """

    all_text_separately = True
    decode_entities = False
    strip_layout_whitespace = False
    max_depth = None

    options = ("all_text_separately", "decode_entities",
               "strip_layout_whitespace", "max_depth")

    def __init__(self, **kwargs):
        unknown = set(kwargs) - set(self.options)
        if unknown:
            raise TypeError("unknown load settings: %s" % ", ".join(sorted(unknown)))
        max_depth = kwargs.get("max_depth", self.max_depth)
        if max_depth is not None and (isinstance(max_depth, bool) or
                                      not isinstance(max_depth, int) or max_depth < 1):
            raise ValueError("max_depth must be a positive integer or None")
        for attr in self.options:
            object.__setattr__(self, attr, kwargs.get(attr, getattr(self, attr)))

    def __setattr__(self, name, value):
        raise AttributeError("LoadSettings is immutable, use replace()")

    def __delattr__(self, name):
        raise AttributeError("LoadSettings is immutable, use replace()")

    def replace(self, **kwargs):
        values = self.asDict()
        values.update(kwargs)
        return LoadSettings(**values)

    def asDict(self):
        return dict((attr, getattr(self, attr)) for attr in self.options)

    def __eq__(self, other):
        if not isinstance(other, LoadSettings):
            return NotImplemented
        return self.asDict() == other.asDict()

    def __hash__(self):
        return hash(tuple(getattr(self, attr) for attr in self.options))

    def __repr__(self):
        return "LoadSettings(%s)" % ", ".join("%s=%r" % (attr, getattr(self, attr))
                                               for attr in self.options)
