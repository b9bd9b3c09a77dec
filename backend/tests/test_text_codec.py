import pytest
from matrix_app.utils.errors import FormatError
from matrix_app.utils.text_codec import (
    Scanner,
    parse_dimension,
    parse_document,
    parse_entry,
    serialize,
    significant_lines,
)

def test_scanner_reads_signed_integers():
    """Test the scanner reads digits with an optional minus sign"""
    scanner = Scanner("-042,17")

    assert scanner.read_int() == -42
    scanner.expect(',')
    assert scanner.read_int() == 17
    assert scanner.at_end()

@pytest.mark.parametrize('text', ['', '-', 'x1', '+3', ' 3'])
def test_scanner_rejects_missing_digits(text):
    """Test the scanner needs at least one digit right at the cursor"""
    with pytest.raises(FormatError):
        Scanner(text).read_int()

def test_significant_lines_drops_blank_lines():
    """Test blank and whitespace-only lines are ignored"""
    text = "\n  rows=2 \r\n\t\n cols=3\n\n(0, 0, 1)\r\n   \n"

    assert significant_lines(text) == ['rows=2', 'cols=3', '(0, 0, 1)']

def test_parse_dimension():
    assert parse_dimension('rows=12', 'rows=') == 12
    assert parse_dimension('cols=007', 'cols=') == 7

@pytest.mark.parametrize('line', [
    'rows=0',
    'rows=-4',
    'rows=',
    'rows= 3',
    'rows=3x',
    'Rows=3',
    'cols=3',
])
def test_parse_dimension_rejects(line):
    """Test malformed or non-positive dimension lines"""
    with pytest.raises(FormatError):
        parse_dimension(line, 'rows=')

@pytest.mark.parametrize('line,expected', [
    ('(0,0,1)', (0, 0, 1)),
    ('(1, 2, -3)', (1, 2, -3)),
    ('(  4 ,\t5 ,  60  )', (4, 5, 60)),
    ('(10,0,0)', (10, 0, 0)),
])
def test_parse_entry(line, expected):
    """Test entries with assorted spacing"""
    assert parse_entry(line) == expected

@pytest.mark.parametrize('line', [
    '0, 0, 1',
    '(0, 0, 1',
    '(0, 0)',
    '(0, 0, 1, 2)',
    '(0 0, 1)',
    '(0, 0, 1) extra',
    '(0, 0, 1.5)',
    '(a, 0, 1)',
    '(1 2, 0, 1)',
    '(-1, 0, 1)',
    '(0, -2, 1)',
    '(0, 0, -)',
])
def test_parse_entry_rejects(line):
    """Test malformed entry lines"""
    with pytest.raises(FormatError):
        parse_entry(line)

def test_parse_document():
    """Test a well formed document keeps declared dimensions and all entries"""
    parsed = parse_document("rows=3\ncols=4\n(2, 3, 9)\n(0, 0, 0)\n")

    assert parsed.rows == 3
    assert parsed.cols == 4
    assert parsed.entries == [(2, 3, 9), (0, 0, 0)]

def test_parse_document_grows_dimensions():
    """Test entries beyond the declared bounds grow the dimensions"""
    parsed = parse_document("rows=2\ncols=2\n(5, 0, 7)")

    assert (parsed.rows, parsed.cols) == (6, 2)

@pytest.mark.parametrize('text', [
    '',
    'rows=2\ncols=2',
    'rows=2\n\n\ncols=2\n   \n',
    'cols=2\nrows=2\n(0, 0, 1)',
    'rows=2\ncols=0\n(0, 0, 1)',
    'rows=2\ncols=2\n(1,1,x)',
    'rows=2\ncols=2\n(0, 0, 1)\n(0, 1, 2\n(1, 1, 3)',
    'rows=2\ncolumns=2\n(0, 0, 1)',
])
def test_parse_document_rejects(text):
    """Test malformed documents fail as a whole"""
    with pytest.raises(FormatError) as excinfo:
        parse_document(text)

    assert str(excinfo.value) == 'Input file has wrong format'

def test_format_error_detail_names_line():
    """Test the error detail points at the offending line"""
    with pytest.raises(FormatError) as excinfo:
        parse_document("rows=2\ncols=2\n(0, 0, 1)\n(0, 1, y)")

    assert '(0, 1, y)' in excinfo.value.detail

def test_serialize_orders_entries():
    """Test serialization sorts by row then column"""
    text = serialize(3, 3, {(2, 1): 4, (0, 2): -1, (2, 0): 8, (0, 0): 5})

    assert text == (
        "rows=3\ncols=3\n"
        "(0, 0, 5)\n"
        "(0, 2, -1)\n"
        "(2, 0, 8)\n"
        "(2, 1, 4)\n"
    )

def test_serialize_empty():
    assert serialize(2, 5, {}) == "rows=2\ncols=5\n"

@pytest.mark.parametrize('line', ['rows=', 'rows=abc', 'rows=-'])
def test_header_error_detail_names_line(line):
    """Test header errors report the whole offending line"""
    with pytest.raises(FormatError) as excinfo:
        parse_dimension(line, 'rows=')

    assert excinfo.value.detail.endswith(': ' + line)
