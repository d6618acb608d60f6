import enum
import logging

from marshmallow import Schema, ValidationError, fields, validates

from sparsecalc.utils.sparse_matrix import SparseMatrix

logger = logging.getLogger(__name__)


class Operation(enum.Enum):
    """Matrix operations selectable by numeric code"""

    ADD = (1, 'addition', 'add')
    SUBTRACT = (2, 'subtraction', 'subtract')
    MULTIPLY = (3, 'multiplication', 'multiply')

    def __init__(self, code, label, method):
        self.code = code
        self.label = label
        self.method = method

    @classmethod
    def from_choice(cls, choice):
        """Resolve a code (1, '2'), member name or label into an Operation"""
        if isinstance(choice, cls):
            return choice

        if isinstance(choice, int) and not isinstance(choice, bool):
            for operation in cls:
                if operation.code == choice:
                    return operation
        elif isinstance(choice, str):
            wanted = choice.strip().lower()
            for operation in cls:
                if wanted in (str(operation.code), operation.name.lower(), operation.label):
                    return operation

        raise ValidationError(
            f"Invalid operation choice: {choice!r}. "
            f"Expected one of {', '.join(str(op.code) for op in cls)}.",
            field_name='operation'
        )

    def apply(self, left, right):
        return getattr(left, self.method)(right)


class OperationField(fields.Field):
    """Accepts an operation code or name and loads it as an Operation"""

    def _deserialize(self, value, attr, data, **kwargs):
        return Operation.from_choice(value)


class CalculationSchema(Schema):
    matrix_a = fields.String(required=True)
    matrix_b = fields.String(required=True)
    operation = OperationField(required=True)

    @validates('matrix_a')
    def validate_matrix_a(self, value, **kwargs):
        if not value.strip():
            raise ValidationError('matrix_a must not be empty')

    @validates('matrix_b')
    def validate_matrix_b(self, value, **kwargs):
        if not value.strip():
            raise ValidationError('matrix_b must not be empty')


class MatrixService:
    """Service that parses matrix text and runs the selected operation"""

    def __init__(self):
        self.schema = CalculationSchema()

    def list_operations(self):
        return [
            {'code': op.code, 'name': op.name.lower(), 'label': op.label}
            for op in Operation
        ]

    def parse(self, text):
        """Parse a single matrix text"""
        return SparseMatrix.parse(text)

    def calculate(self, matrix_a_text, matrix_b_text, operation):
        """
        Parse both operands and apply the operation.

        Args:
            matrix_a_text (str): Left operand text
            matrix_b_text (str): Right operand text
            operation: Operation, code or name

        Returns:
            SparseMatrix: Result matrix

        Raises:
            FormatError: If either operand has a malformed header
            DimensionMismatchError: If the shapes don't fit the operation
            ValidationError: If the operation is unknown
        """
        operation = Operation.from_choice(operation)
        left = SparseMatrix.parse(matrix_a_text)
        right = SparseMatrix.parse(matrix_b_text)

        try:
            result = operation.apply(left, right)
        except ValueError as e:
            logger.warning("%s of %dx%d and %dx%d failed: %s", operation.label,
                           left.rows, left.cols, right.rows, right.cols, e)
            raise

        logger.info("%s of %dx%d and %dx%d -> %dx%d (%d stored elements)",
                    operation.label, left.rows, left.cols, right.rows, right.cols,
                    result.rows, result.cols, result.nnz)
        return result

    def calculate_from_payload(self, payload):
        """Validate a request payload and run the calculation"""
        data = self.schema.load(payload)
        return data['operation'], self.calculate(data['matrix_a'], data['matrix_b'], data['operation'])

    def describe(self, matrix):
        """JSON friendly description of a matrix"""
        return {
            'rows': matrix.rows,
            'cols': matrix.cols,
            'nnz': matrix.nnz,
            'text': matrix.serialize()
        }
