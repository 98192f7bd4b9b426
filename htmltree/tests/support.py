import os
import codecs
import glob

test_dir = os.path.join(os.path.dirname(__file__), "testdata")


def get_data_files(subdirectory, files="*.dat"):
    return sorted(glob.glob(os.path.join(test_dir, subdirectory, files)))


class TestData(object):
    """Iterate over the tests of a data file.

    A test is a run of sections, each starting with a "#heading" line; a
    test starts at each newTestHeading. Tests are separated by a blank
    line. Each test is a dict of heading to section text.
    """

    __test__ = False

    def __init__(self, filename, newTestHeading="data"):
        self.filename = filename
        self.newTestHeading = newTestHeading

    def __iter__(self):
        data = {}
        key = None
        with codecs.open(self.filename, "r", "utf8") as f:
            for line in f:
                heading = self.isSectionHeading(line)
                if heading:
                    if data and heading == self.newTestHeading:
                        # Remove the blank line before the next test
                        data[key] = data[key][:-1]
                        yield self.normaliseOutput(data)
                        data = {}
                    key = heading
                    data[key] = ""
                elif key is not None:
                    data[key] += line
        if data:
            yield self.normaliseOutput(data)

    def isSectionHeading(self, line):
        """If the current heading is a test section heading return the heading,
        otherwise return False"""
        if line.startswith("#"):
            return line[1:].strip()
        else:
            return False

    def normaliseOutput(self, data):
        # Remove trailing newlines
        for key, value in data.items():
            if value.endswith("\n"):
                data[key] = value[:-1]
        return data


def errorMessage(input, expected, actual):
    return ("Input:\n%s\nExpected:\n%s\nReceived:\n%s\n" %
            (repr(input), repr(expected), repr(actual)))
