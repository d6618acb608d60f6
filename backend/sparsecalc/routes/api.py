from functools import wraps

from flask import Blueprint, request, jsonify, Response, current_app
from marshmallow import ValidationError
from werkzeug.utils import secure_filename

from sparsecalc.services.matrix_service import MatrixService, Operation
from sparsecalc.utils.helpers import generate_response, decode_upload
from sparsecalc.utils.sparse_matrix import FormatError, DimensionMismatchError

api_bp = Blueprint('api', __name__)
matrix_service = MatrixService()


def error_response(status, error, details=None):
    return jsonify(generate_response(success=False, error=error, details=details)), status


def handle_matrix_errors(f):
    """Translate matrix and validation errors into JSON error responses"""
    @wraps(f)
    def decorated(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except ValidationError as e:
            current_app.logger.info("Validation error on %s: %s", request.endpoint, e.messages)
            return error_response(400, 'Validation error', e.messages)
        except FormatError as e:
            current_app.logger.info("Invalid matrix format on %s: %s", request.endpoint, e)
            return error_response(400, 'Invalid matrix format', str(e))
        except DimensionMismatchError as e:
            current_app.logger.info("Dimension mismatch on %s: %s", request.endpoint, e)
            return error_response(422, 'Dimension mismatch', str(e))
        except UnicodeDecodeError as e:
            return error_response(400, 'Uploaded files must be UTF-8 text', str(e))
        except Exception as e:
            current_app.logger.exception("Unexpected error on %s", request.endpoint)
            return error_response(500, str(e))
    return decorated


@api_bp.route('/operations', methods=['GET'])
def list_operations():
    """List the available matrix operations"""
    operations = matrix_service.list_operations()
    return jsonify(generate_response(data=operations)), 200


@api_bp.route('/matrices/parse', methods=['POST'])
@handle_matrix_errors
def parse_matrix():
    """Parse a matrix and return its normalized text"""
    data = request.get_json(silent=True)
    if not data:
        return error_response(400, 'No data provided')
    if not isinstance(data, dict):
        raise ValidationError({'_schema': ['Expected a JSON object']})

    text = data.get('matrix')
    if not isinstance(text, str):
        raise ValidationError({'matrix': ['Matrix text is required']})

    matrix = matrix_service.parse(text)
    return jsonify(generate_response(data=matrix_service.describe(matrix))), 200


@api_bp.route('/matrices/calculate', methods=['POST'])
@handle_matrix_errors
def calculate():
    """Run an operation on two matrices sent as JSON text"""
    data = request.get_json(silent=True)
    if not data:
        return error_response(400, 'No data provided')

    operation, result = matrix_service.calculate_from_payload(data)
    return jsonify(generate_response(
        data={
            'operation': operation.label,
            'result': matrix_service.describe(result)
        },
        message=f'Output of {operation.label}'
    )), 200


@api_bp.route('/matrices/calculate/upload', methods=['POST'])
@handle_matrix_errors
def calculate_upload():
    """Run an operation on two uploaded matrix files and return the result file"""
    missing = [name for name in ('matrix_a', 'matrix_b') if name not in request.files]
    if missing:
        return error_response(400, 'No file provided', {name: ['File is required'] for name in missing})

    file_a = request.files['matrix_a']
    file_b = request.files['matrix_b']
    if file_a.filename == '' or file_b.filename == '':
        return error_response(400, 'No file selected')

    operation = Operation.from_choice(request.form.get('operation', ''))
    current_app.logger.info("Upload %s: %s, %s", operation.label,
                            secure_filename(file_a.filename), secure_filename(file_b.filename))

    result = matrix_service.calculate(decode_upload(file_a), decode_upload(file_b), operation)
    return Response(
        result.serialize(),
        mimetype='text/plain',
        headers={'Content-Disposition': 'attachment; filename=result.txt'}
    )
