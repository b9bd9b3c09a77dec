"""
Reading and writing the plain-text matrix format::

    rows=<positive integer>
    cols=<positive integer>
    (<row>, <col>, <value>)
    ...

Parsing is done with a small hand-written scanner instead of regular
expressions or ``int()`` so that every accepted character is explicit.
"""
from collections import namedtuple

from .errors import FormatError

WHITESPACE = ' \t\r\n'
ROWS_PREFIX = 'rows='
COLS_PREFIX = 'cols='

ParsedMatrix = namedtuple('ParsedMatrix', ['rows', 'cols', 'entries'])


class Scanner:
    """Cursor over a single line of text."""

    def __init__(self, text):
        self.text = text
        self.pos = 0

    def at_end(self):
        return self.pos >= len(self.text)

    def peek(self):
        if self.at_end():
            return None
        return self.text[self.pos]

    def skip_whitespace(self):
        while not self.at_end() and self.text[self.pos] in WHITESPACE:
            self.pos += 1

    def expect(self, char):
        if self.peek() != char:
            raise FormatError(f"expected {char!r} at column {self.pos + 1}: {self.text}")
        self.pos += 1

    def read_int(self):
        """
        Reads an optionally negative run of decimal digits.

        Returns:
            int: The parsed value

        Raises:
            FormatError: If no digit follows the optional sign
        """
        negative = False
        if self.peek() == '-':
            negative = True
            self.pos += 1

        start = self.pos
        value = 0
        while not self.at_end():
            char = self.text[self.pos]
            if char < '0' or char > '9':
                break
            value = value * 10 + (ord(char) - ord('0'))
            self.pos += 1

        if self.pos == start:
            raise FormatError(f"expected an integer at column {self.pos + 1}: {self.text}")

        return -value if negative else value


def significant_lines(text):
    """Splits text on newlines, trims each line and drops the blank ones."""
    lines = []
    for raw_line in text.split('\n'):
        line = raw_line.strip(WHITESPACE)
        if line:
            lines.append(line)
    return lines


def parse_dimension(line, prefix):
    """Parses a ``rows=<n>`` / ``cols=<n>`` header line into a positive int."""
    if not line.startswith(prefix):
        raise FormatError(f"expected '{prefix}<integer>': {line}")

    scanner = Scanner(line[len(prefix):])
    try:
        value = scanner.read_int()
    except FormatError:
        raise FormatError(f"expected '{prefix}<integer>': {line}") from None
    if not scanner.at_end():
        raise FormatError(f"unexpected characters after dimension: {line}")
    if value <= 0:
        raise FormatError(f"dimension must be positive: {line}")
    return value


def parse_entry(line):
    """
    Parses one ``(<row>, <col>, <value>)`` line.

    Args:
        line (str): A trimmed, non-blank line

    Returns:
        tuple: (row, col, value)
    """
    scanner = Scanner(line)
    scanner.expect('(')

    numbers = []
    for separator in (',', ',', ')'):
        scanner.skip_whitespace()
        numbers.append(scanner.read_int())
        scanner.skip_whitespace()
        scanner.expect(separator)

    if not scanner.at_end():
        raise FormatError(f"unexpected characters after entry: {line}")

    row, col, value = numbers
    if row < 0 or col < 0:
        raise FormatError(f"negative index in entry: {line}")
    return row, col, value


def parse_document(text):
    """
    Validates a whole matrix document.

    Declared dimensions are a lower bound: when an entry lies beyond them
    the affected dimension grows to fit it. Entries are returned in
    document order, zeros included, and are not committed anywhere.

    Args:
        text (str): Document contents

    Returns:
        ParsedMatrix: Final dimensions and the parsed entries

    Raises:
        FormatError: On any structural problem, for the document as a whole
    """
    lines = significant_lines(text)
    if len(lines) < 3:
        raise FormatError("insufficient data")

    rows = parse_dimension(lines[0], ROWS_PREFIX)
    cols = parse_dimension(lines[1], COLS_PREFIX)

    max_row = 0
    max_col = 0
    entries = []
    for line in lines[2:]:
        row, col, value = parse_entry(line)
        max_row = max(max_row, row)
        max_col = max(max_col, col)
        entries.append((row, col, value))

    if max_row >= rows:
        rows = max_row + 1
    if max_col >= cols:
        cols = max_col + 1

    return ParsedMatrix(rows, cols, entries)


def serialize(rows, cols, elements):
    """
    Renders a matrix in the text format.

    Args:
        rows (int): Number of rows
        cols (int): Number of columns
        elements (dict): (row, col) -> value, non-zero entries only

    Returns:
        str: Header followed by one line per entry, ordered by row then column
    """
    lines = [f"{ROWS_PREFIX}{rows}\n", f"{COLS_PREFIX}{cols}\n"]
    for (row, col) in sorted(elements):
        lines.append(f"({row}, {col}, {elements[(row, col)]})\n")
    return ''.join(lines)
