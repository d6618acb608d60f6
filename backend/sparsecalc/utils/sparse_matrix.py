import logging
import re

logger = logging.getLogger(__name__)

ROWS_PATTERN = re.compile(r'rows=(\d+)')
COLS_PATTERN = re.compile(r'cols=(\d+)')
ELEMENT_PATTERN = re.compile(r'\((\d+),\s*(\d+),\s*(-?\d+)\)')


class SparseMatrixError(Exception):
    """Base error for sparse matrix operations."""


class FormatError(SparseMatrixError, ValueError):
    """Raised when matrix text has missing or malformed dimension lines."""


class DimensionMismatchError(SparseMatrixError, ValueError):
    """Raised when operand dimensions are incompatible for an operation."""


class SparseMatrix:
    """
    Sparse integer matrix backed by a dictionary of non-zero elements.
    Only stored coordinates take memory; every other cell reads as 0.
    """

    def __init__(self, rows, cols):
        """
        Creates an empty matrix with the given dimensions.

        Args:
            rows (int): Number of rows
            cols (int): Number of columns
        """
        self.rows = rows
        self.cols = cols
        self.data = {}  # (row, col) -> value

    @classmethod
    def parse(cls, text):
        """
        Builds a matrix from its coordinate-list text.

        The first line must hold ``rows=<n>`` and the second ``cols=<n>``.
        Every later line containing ``(row, col, value)`` sets that element;
        lines that don't match are ignored.

        Args:
            text (str): Matrix text

        Returns:
            SparseMatrix: Parsed matrix

        Raises:
            FormatError: If the dimension lines are missing or malformed
        """
        lines = text.strip().splitlines()

        if len(lines) < 2:
            raise FormatError("Invalid matrix file: not enough lines for matrix dimensions.")

        row_match = ROWS_PATTERN.search(lines[0])
        col_match = COLS_PATTERN.search(lines[1])

        if not row_match or not col_match:
            raise FormatError("Invalid matrix file: could not parse dimensions.")

        matrix = cls(int(row_match.group(1)), int(col_match.group(1)))

        for line_number, line in enumerate(lines[2:], start=3):
            match = ELEMENT_PATTERN.search(line)
            if not match:
                logger.debug("Skipping line %d: %r", line_number, line)
                continue

            row, col, value = (int(group) for group in match.groups())
            matrix.set_element(row, col, value)

        return matrix

    @property
    def shape(self):
        return (self.rows, self.cols)

    @property
    def nnz(self):
        """Number of stored elements."""
        return len(self.data)

    def get_element(self, row, col):
        """
        Gets the value at the given position.

        Args:
            row (int): Row index (0-based)
            col (int): Column index (0-based)

        Returns:
            int: Stored value, 0 if not present
        """
        return self.data.get((row, col), 0)

    def set_element(self, row, col, value):
        """
        Stores a value at the given position, overwriting any previous one.
        Zero is stored as given; coordinates are not bounds checked.

        Args:
            row (int): Row index (0-based)
            col (int): Column index (0-based)
            value (int): Value to store
        """
        self.data[(row, col)] = value

    def items(self):
        """Yields (row, col, value) triples sorted by coordinate."""
        for (row, col), value in sorted(self.data.items()):
            yield row, col, value

    def _check_same_shape(self, other, operation):
        if self.rows != other.rows or self.cols != other.cols:
            raise DimensionMismatchError(
                f"Matrices must have the same dimensions for {operation} "
                f"({self.rows}x{self.cols} vs {other.rows}x{other.cols})."
            )

    def _elementwise(self, other, sign):
        result = SparseMatrix(self.rows, self.cols)
        result.data = dict(self.data)

        for key, value in other.data.items():
            result.data[key] = result.data.get(key, 0) + sign * value

        result.data = {key: value for key, value in result.data.items() if value != 0}
        return result

    def add(self, other):
        """
        Adds another matrix to this one.

        Args:
            other (SparseMatrix): Matrix to add

        Returns:
            SparseMatrix: New matrix with the result

        Raises:
            DimensionMismatchError: If the shapes differ
        """
        self._check_same_shape(other, "addition")
        return self._elementwise(other, 1)

    def subtract(self, other):
        """
        Subtracts another matrix from this one.

        Args:
            other (SparseMatrix): Matrix to subtract

        Returns:
            SparseMatrix: New matrix with the result

        Raises:
            DimensionMismatchError: If the shapes differ
        """
        self._check_same_shape(other, "subtraction")
        return self._elementwise(other, -1)

    def multiply(self, other):
        """
        Multiplies this matrix by another one.

        Only the stored elements of this matrix are visited; for each of them
        every column of ``other`` is looked up in the matching row.

        Args:
            other (SparseMatrix): Right-hand matrix

        Returns:
            SparseMatrix: New ``self.rows x other.cols`` matrix

        Raises:
            DimensionMismatchError: If ``self.cols != other.rows``
        """
        if self.cols != other.rows:
            raise DimensionMismatchError(
                "Number of columns of the first matrix must equal number of rows "
                f"of the second matrix ({self.cols} vs {other.rows})."
            )

        result = SparseMatrix(self.rows, other.cols)

        for (row, col), value in self.data.items():
            for k in range(other.cols):
                other_value = other.get_element(col, k)
                if other_value != 0:
                    result.data[(row, k)] = result.data.get((row, k), 0) + value * other_value

        result.data = {key: value for key, value in result.data.items() if value != 0}
        return result

    def serialize(self):
        """
        Converts the matrix to its coordinate-list text.

        Returns:
            str: ``rows=``/``cols=`` header followed by one line per stored element
        """
        lines = [f"rows={self.rows}", f"cols={self.cols}"]
        lines.extend(f"({row}, {col}, {value})" for row, col, value in self.items())
        return "\n".join(lines) + "\n"

    def __add__(self, other):
        return self.add(other)

    def __sub__(self, other):
        return self.subtract(other)

    def __matmul__(self, other):
        return self.multiply(other)

    def __eq__(self, other):
        if not isinstance(other, SparseMatrix):
            return NotImplemented
        if self.shape != other.shape:
            return False
        mine = {key: value for key, value in self.data.items() if value != 0}
        theirs = {key: value for key, value in other.data.items() if value != 0}
        return mine == theirs

    __hash__ = None

    def __str__(self):
        return self.serialize()

    def __repr__(self):
        return f"SparseMatrix({self.rows}x{self.cols}, {len(self.data)} stored elements)"


def parse_matrix(text):
    """Parses matrix text. See ``SparseMatrix.parse``."""
    return SparseMatrix.parse(text)

