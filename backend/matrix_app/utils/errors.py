class MatrixError(Exception):
    """Base class for every error raised by the sparse matrix core."""


class FormatError(MatrixError, ValueError):
    """
    Raised when a matrix text document cannot be parsed.

    The message is always the same so callers can report it verbatim;
    `detail` names the offending line when one is known.
    """

    MESSAGE = "Input file has wrong format"

    def __init__(self, detail=None):
        super().__init__(self.MESSAGE)
        self.detail = detail


class OutOfBoundsError(MatrixError, IndexError):
    """Raised by element access outside the current dimensions."""

    def __init__(self, row, col, rows, cols):
        super().__init__(
            f"Index out of bounds: ({row}, {col}) not in matrix of size {rows}x{cols}"
        )
        self.row = row
        self.col = col


class DimensionMismatchError(MatrixError, ValueError):
    """Raised when two matrices have incompatible shapes for an operation."""

    def __init__(self, operation, left_shape, right_shape):
        super().__init__(
            f"Matrix dimensions don't match for {operation}: "
            f"{left_shape[0]}x{left_shape[1]} and {right_shape[0]}x{right_shape[1]}"
        )
        self.operation = operation
