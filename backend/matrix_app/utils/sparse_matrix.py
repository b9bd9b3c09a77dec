from collections import defaultdict

from .errors import DimensionMismatchError, OutOfBoundsError
from .text_codec import parse_document, serialize


class SparseMatrix:
    """
    Sparse integer matrix backed by a dictionary of non-zero elements.
    Efficient for matrices where most elements are zero.
    """

    def __init__(self, rows, cols):
        """
        Creates an empty matrix with the given dimensions.

        Args:
            rows (int): Number of rows
            cols (int): Number of columns
        """
        if rows <= 0 or cols <= 0:
            raise ValueError(f"Matrix dimensions must be positive, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self.elements = {}  # (row, col) -> value, never zero
        self.element_count = 0

    @classmethod
    def from_text(cls, text):
        """
        Builds a matrix from a text document.

        Args:
            text (str): Document in the rows=/cols=/(r, c, v) format

        Returns:
            SparseMatrix: The loaded matrix

        Raises:
            FormatError: If the document is malformed
        """
        parsed = parse_document(text)
        matrix = cls(parsed.rows, parsed.cols)
        for row, col, value in parsed.entries:
            if value != 0:
                matrix.set_element(row, col, value)
        return matrix

    @classmethod
    def from_file(cls, file_path):
        """Builds a matrix from a text file."""
        with open(file_path, 'r', encoding='utf-8') as f:
            return cls.from_text(f.read())

    def _check_bounds(self, row, col):
        if row < 0 or row >= self.rows or col < 0 or col >= self.cols:
            raise OutOfBoundsError(row, col, self.rows, self.cols)

    def set_element(self, row, col, value):
        """
        Sets the value at the given position. Zero removes the element.

        Args:
            row (int): Row index (0-based)
            col (int): Column index (0-based)
            value (int): Value to store

        Raises:
            OutOfBoundsError: If the position lies outside the matrix
        """
        self._check_bounds(row, col)

        key = (row, col)
        if value == 0:
            if key in self.elements:
                del self.elements[key]
                self.element_count -= 1
        else:
            if key not in self.elements:
                self.element_count += 1
            self.elements[key] = value

    def get_element(self, row, col):
        """
        Gets the value at the given position.

        Args:
            row (int): Row index (0-based)
            col (int): Column index (0-based)

        Returns:
            int: Value at (row, col), 0 if not stored

        Raises:
            OutOfBoundsError: If the position lies outside the matrix
        """
        self._check_bounds(row, col)
        return self.elements.get((row, col), 0)

    def non_zero_elements(self):
        """Returns every stored element as (row, col, value), ordered by row then column."""
        return [(r, c, self.elements[(r, c)]) for (r, c) in sorted(self.elements)]

    def get_row(self, row):
        """
        Gets the non-zero elements of one row.

        Args:
            row (int): Row index (0-based)

        Returns:
            dict: Column index -> value
        """
        self._check_bounds(row, 0)
        return {c: value for (r, c), value in self.elements.items() if r == row}

    def get_column(self, col):
        """
        Gets the non-zero elements of one column.

        Args:
            col (int): Column index (0-based)

        Returns:
            dict: Row index -> value
        """
        self._check_bounds(0, col)
        return {r: value for (r, c), value in self.elements.items() if c == col}

    def _combine(self, other, sign, operation):
        if self.rows != other.rows or self.cols != other.cols:
            raise DimensionMismatchError(
                operation, (self.rows, self.cols), (other.rows, other.cols)
            )

        result = SparseMatrix(self.rows, self.cols)

        for (r, c), value in self.elements.items():
            result.set_element(r, c, value)

        for (r, c), value in other.elements.items():
            current_value = result.get_element(r, c)
            result.set_element(r, c, current_value + sign * value)

        return result

    def add(self, other):
        """
        Adds another sparse matrix to this one.

        Args:
            other (SparseMatrix): Matrix to add

        Returns:
            SparseMatrix: New matrix with the result

        Raises:
            DimensionMismatchError: If the shapes differ
        """
        return self._combine(other, 1, 'addition')

    def subtract(self, other):
        """
        Subtracts another sparse matrix from this one.

        Args:
            other (SparseMatrix): Matrix to subtract

        Returns:
            SparseMatrix: New matrix with the result

        Raises:
            DimensionMismatchError: If the shapes differ
        """
        return self._combine(other, -1, 'subtraction')

    def multiply(self, other):
        """
        Multiplies this matrix by another sparse matrix.

        Args:
            other (SparseMatrix): Right-hand matrix

        Returns:
            SparseMatrix: New rows x other.cols matrix with the result

        Raises:
            DimensionMismatchError: If self.cols != other.rows
        """
        if self.cols != other.rows:
            raise DimensionMismatchError(
                'multiplication', (self.rows, self.cols), (other.rows, other.cols)
            )

        result = SparseMatrix(self.rows, other.cols)

        # Non-zero elements of the other matrix grouped by row
        other_rows = defaultdict(list)
        for (r2, c2), value2 in other.elements.items():
            other_rows[r2].append((c2, value2))

        for (r1, c1), value1 in self.elements.items():
            # Column of the first matrix matches row of the second one
            for c2, value2 in other_rows.get(c1, ()):
                current_value = result.get_element(r1, c2)
                result.set_element(r1, c2, current_value + value1 * value2)

        return result

    def transpose(self):
        """
        Transposes the matrix.

        Returns:
            SparseMatrix: Transposed matrix
        """
        result = SparseMatrix(self.cols, self.rows)

        for (r, c), value in self.elements.items():
            result.set_element(c, r, value)

        return result

    def get_density(self):
        """
        Computes the share of non-zero cells.

        Returns:
            float: Density as a percentage
        """
        return (self.element_count / (self.rows * self.cols)) * 100

    def to_dense(self):
        """Expands the matrix into a list of row lists."""
        dense = [[0] * self.cols for _ in range(self.rows)]
        for (r, c), value in self.elements.items():
            dense[r][c] = value
        return dense

    def to_text(self):
        """
        Serializes the matrix to the text format.

        Returns:
            str: Text representation, entries ordered by row then column
        """
        return serialize(self.rows, self.cols, self.elements)

    def save(self, file_path):
        """Writes the text representation to a file."""
        with open(file_path, 'w', encoding='utf-8') as f:
            f.write(self.to_text())

    def __add__(self, other):
        return self.add(other)

    def __sub__(self, other):
        return self.subtract(other)

    def __matmul__(self, other):
        return self.multiply(other)

    def __eq__(self, other):
        if not isinstance(other, SparseMatrix):
            return NotImplemented
        return (self.rows, self.cols, self.elements) == (other.rows, other.cols, other.elements)

    def __str__(self):
        return self.to_text()

    def __repr__(self):
        return f"SparseMatrix({self.rows}x{self.cols}, {self.element_count} non-zero elements)"


def create_sparse_matrix_from_data(rows, cols, data_dict):
    """
    Creates a sparse matrix from a dictionary of values.
    Args:
        rows (int): Number of rows
        cols (int): Number of columns
        data_dict (dict): Keys are (row, col) tuples or 'row,col' strings
    Returns:
        SparseMatrix: New sparse matrix
    """
    matrix = SparseMatrix(rows, cols)
    for key, value in data_dict.items():
        if isinstance(key, str):
            row, col = map(int, key.split(','))
        else:
            row, col = key
        matrix.set_element(row, col, value)
    return matrix


def create_identity_matrix(size):
    """
    Creates an identity matrix of the given size.

    Args:
        size (int): Number of rows and columns

    Returns:
        SparseMatrix: Identity matrix
    """
    matrix = SparseMatrix(size, size)
    for i in range(size):
        matrix.set_element(i, i, 1)
    return matrix


def create_zero_matrix(rows, cols):
    """
    Creates a zero matrix with the given dimensions.

    Args:
        rows (int): Number of rows
        cols (int): Number of columns

    Returns:
        SparseMatrix: Zero matrix
    """
    return SparseMatrix(rows, cols)
