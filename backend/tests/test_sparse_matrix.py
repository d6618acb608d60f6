import pytest

from sparsecalc.utils.sparse_matrix import (
    SparseMatrix,
    FormatError,
    DimensionMismatchError,
    parse_matrix,
)


def make_matrix(rows, cols, entries):
    matrix = SparseMatrix(rows, cols)
    for (row, col), value in entries.items():
        matrix.set_element(row, col, value)
    return matrix


@pytest.fixture
def matrix_a():
    """2x2 matrix [[1, 2], [3, 4]]"""
    return make_matrix(2, 2, {(0, 0): 1, (0, 1): 2, (1, 0): 3, (1, 1): 4})


@pytest.fixture
def matrix_b():
    """2x2 matrix [[0, -5], [7, 0]]"""
    return make_matrix(2, 2, {(0, 1): -5, (1, 0): 7})


@pytest.mark.parametrize('rows,cols', [(0, 0), (1, 1), (3, 5)])
def test_new_matrix_reads_zero_everywhere(rows, cols):
    """Test an empty matrix returns 0 for any coordinate"""
    matrix = SparseMatrix(rows, cols)
    assert matrix.nnz == 0
    for i in range(rows + 2):
        for j in range(cols + 2):
            assert matrix.get_element(i, j) == 0


def test_set_element_overwrites_and_keeps_zero():
    """Test set_element overwrites and stores explicit zeros"""
    matrix = SparseMatrix(3, 3)
    matrix.set_element(1, 2, 9)
    matrix.set_element(1, 2, -4)
    assert matrix.get_element(1, 2) == -4

    matrix.set_element(0, 0, 0)
    assert matrix.get_element(0, 0) == 0
    assert (0, 0) in matrix.data


def test_set_element_out_of_range_is_not_checked():
    """Test coordinates outside the dimensions are stored as given"""
    matrix = SparseMatrix(2, 2)
    matrix.set_element(10, 10, 3)
    assert matrix.get_element(10, 10) == 3
    assert matrix.get_element(5, 5) == 0


def test_parse_basic():
    """Test parsing dimensions and elements"""
    matrix = SparseMatrix.parse("rows=3\ncols=4\n(0, 1, 5)\n(2,3,-7)\n")
    assert matrix.shape == (3, 4)
    assert matrix.get_element(0, 1) == 5
    assert matrix.get_element(2, 3) == -7
    assert matrix.nnz == 2


def test_parse_skips_garbage_lines():
    """Test garbage lines do not abort parsing"""
    matrix = parse_matrix("rows=2\ncols=2\ngarbage line\n(0,0,5)\n")
    assert matrix.shape == (2, 2)
    assert matrix.get_element(0, 0) == 5
    assert matrix.nnz == 1


def test_parse_ignores_blank_and_comment_lines():
    """Test blank lines, comments and CRLF endings are tolerated"""
    text = "\n  rows=2\r\ncols=3\r\n\r\n# comment\r\n(1,  2,   8)\r\n(1, 2)\r\n"
    matrix = parse_matrix(text)
    assert matrix.shape == (2, 3)
    assert matrix.data == {(1, 2): 8}


def test_parse_last_write_wins():
    """Test duplicate coordinates keep the last value"""
    matrix = parse_matrix("rows=1\ncols=1\n(0, 0, 1)\n(0, 0, 2)\n")
    assert matrix.get_element(0, 0) == 2


@pytest.mark.parametrize('text', [
    "rows=2\n",
    "",
    "rows=2\ncolumns=2\n(0, 0, 1)",
    "rows=x\ncols=2\n",
    "cols=2\nrows=2\n",
])
def test_parse_malformed_header(text):
    """Test missing or malformed header lines raise FormatError"""
    with pytest.raises(FormatError):
        parse_matrix(text)


def test_format_error_is_value_error():
    """Test FormatError can be caught as ValueError"""
    with pytest.raises(ValueError):
        parse_matrix("rows=2\n")


def test_serialize():
    """Test serialized text layout"""
    matrix = SparseMatrix(2, 3)
    matrix.set_element(1, 2, -3)
    matrix.set_element(0, 1, 4)
    assert matrix.serialize() == "rows=2\ncols=3\n(0, 1, 4)\n(1, 2, -3)\n"
    assert str(matrix) == matrix.serialize()


def test_serialize_parse_round_trip():
    """Test parsing serialized text restores every set element"""
    matrix = SparseMatrix(4, 5)
    matrix.set_element(0, 0, 11)
    matrix.set_element(3, 4, -2)
    matrix.set_element(2, 1, 0)
    matrix.set_element(1, 3, 123456789)

    restored = parse_matrix(matrix.serialize())
    assert restored.shape == matrix.shape
    assert restored.data == matrix.data


def test_add(matrix_a, matrix_b):
    """Test elementwise addition"""
    result = matrix_a.add(matrix_b)
    assert result.shape == (2, 2)
    assert result.data == {(0, 0): 1, (0, 1): -3, (1, 0): 10, (1, 1): 4}


def test_add_is_commutative(matrix_a, matrix_b):
    """Test A + B equals B + A"""
    assert matrix_a.add(matrix_b) == matrix_b.add(matrix_a)
    assert matrix_a + matrix_b == matrix_b + matrix_a


def test_subtract(matrix_a, matrix_b):
    """Test elementwise subtraction"""
    result = matrix_a.subtract(matrix_b)
    assert result.data == {(0, 0): 1, (0, 1): 7, (1, 0): -4, (1, 1): 4}
    assert (matrix_a - matrix_b) == result


def test_subtract_self_is_zero(matrix_a):
    """Test A - A is zero at every coordinate of A"""
    result = matrix_a.subtract(matrix_a)
    for (row, col) in matrix_a.data:
        assert result.get_element(row, col) == 0
    assert result.nnz == 0
    assert result == SparseMatrix(2, 2)


@pytest.mark.parametrize('method', ['add', 'subtract', 'multiply'])
def test_result_does_not_alias_operands(matrix_a, matrix_b, method):
    """Test results are new matrices and operands stay untouched"""
    before_a = dict(matrix_a.data)
    before_b = dict(matrix_b.data)

    result = getattr(matrix_a, method)(matrix_b)
    assert result.data is not matrix_a.data
    assert result.data is not matrix_b.data
    result.set_element(0, 0, 100)

    assert result is not matrix_a
    assert matrix_a.data == before_a
    assert matrix_b.data == before_b


@pytest.mark.parametrize('method', ['add', 'subtract'])
def test_elementwise_dimension_mismatch(method):
    """Test 2x3 and 3x2 cannot be added or subtracted"""
    left = SparseMatrix(2, 3)
    right = SparseMatrix(3, 2)
    with pytest.raises(DimensionMismatchError):
        getattr(left, method)(right)


def test_multiply_by_identity(matrix_a):
    """Test A times the identity is A, with no extra entries"""
    identity = parse_matrix("rows=2\ncols=2\n(0, 0, 1)\n(1, 1, 1)\n")
    result = matrix_a.multiply(identity)
    assert result.shape == (2, 2)
    assert result.data == matrix_a.data
    assert result.nnz == 4


def test_multiply_rectangular():
    """Test (2x3) times (3x2) product"""
    left = make_matrix(2, 3, {(0, 0): 1, (0, 2): 2, (1, 1): 3})
    right = make_matrix(3, 2, {(0, 1): 4, (1, 0): -1, (2, 0): 5, (2, 1): 6})

    result = left @ right
    assert result.shape == (2, 2)
    assert result.data == {(0, 0): 10, (0, 1): 16, (1, 0): -3}


def test_multiply_drops_cancelled_sums():
    """Test accumulated sums that cancel out are not stored"""
    left = make_matrix(1, 2, {(0, 0): 1, (0, 1): 1})
    right = make_matrix(2, 1, {(0, 0): 3, (1, 0): -3})
    result = left.multiply(right)
    assert result.shape == (1, 1)
    assert result.nnz == 0


def test_multiply_dimension_mismatch():
    """Test multiply rejects a.cols != b.rows"""
    with pytest.raises(DimensionMismatchError):
        SparseMatrix(2, 3).multiply(SparseMatrix(2, 3))


def test_equality_ignores_explicit_zeros():
    """Test explicit zeros compare equal to absent entries"""
    left = SparseMatrix(2, 2)
    right = SparseMatrix(2, 2)
    left.set_element(1, 1, 0)
    assert left == right
    assert left != SparseMatrix(2, 3)


def test_items_sorted():
    """Test items are yielded by coordinate"""
    matrix = make_matrix(3, 3, {(2, 0): 1, (0, 2): 2, (0, 1): 3})
    assert list(matrix.items()) == [(0, 1, 3), (0, 2, 2), (2, 0, 1)]
    assert repr(matrix) == "SparseMatrix(3x3, 3 stored elements)"
