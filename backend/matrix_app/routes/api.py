from flask import Blueprint, request, jsonify, Response, current_app
from marshmallow import ValidationError
from matrix_app.services.matrix_service import MatrixNotFoundError
from matrix_app.utils.errors import FormatError, MatrixError
from matrix_app.utils.helpers import generate_response, name_from_filename

api_bp = Blueprint('api', __name__)

def get_matrix_service():
    return current_app.extensions['matrix_service']

def error_response(e):
    """Translate an exception into the JSON error envelope and a status code"""
    if isinstance(e, MatrixNotFoundError):
        return jsonify(generate_response(False, error=str(e))), 404
    if isinstance(e, ValidationError):
        return jsonify(generate_response(False, error='Validation error', details=e.messages)), 400
    if isinstance(e, FormatError):
        return jsonify(generate_response(False, error=str(e), details=e.detail)), 400
    if isinstance(e, MatrixError):
        return jsonify(generate_response(False, error=str(e))), 400

    current_app.logger.exception("Unexpected error on %s", request.path)
    return jsonify(generate_response(False, error=str(e))), 500

def is_truthy(value):
    return str(value).lower() in ('1', 'true', 'yes')

# Matrix Management
@api_bp.route('/matrices', methods=['GET'])
def get_matrices():
    """Get all stored matrices"""
    try:
        matrices = get_matrix_service().get_all_matrices()
        return jsonify(generate_response(data=matrices, count=len(matrices))), 200
    except Exception as e:
        return error_response(e)

@api_bp.route('/matrices', methods=['POST'])
def create_matrix():
    """Create a matrix from text content or from rows/cols"""
    try:
        data = request.get_json(silent=True)
        if not data:
            return jsonify(generate_response(False, error='No data provided')), 400

        matrix = get_matrix_service().create_matrix(data)
        return jsonify(generate_response(data=matrix, message='Matrix created successfully')), 201
    except Exception as e:
        return error_response(e)

@api_bp.route('/matrices/upload', methods=['POST'])
def upload_matrix():
    """Upload a matrix text file"""
    if 'file' not in request.files:
        return jsonify(generate_response(False, error='No file provided')), 400

    file = request.files['file']
    if file.filename == '':
        return jsonify(generate_response(False, error='No file selected')), 400

    if not file.filename.lower().endswith('.txt'):
        return jsonify(generate_response(False, error='Only .txt files are allowed')), 400

    name = request.form.get('name') or name_from_filename(file.filename)
    overwrite = is_truthy(request.form.get('overwrite', 'false'))

    try:
        content = file.read().decode('utf-8')
    except UnicodeDecodeError:
        return jsonify(generate_response(False, error='File must be UTF-8 text')), 400

    try:
        matrix = get_matrix_service().load_matrix_text(
            name, content, source=file.filename, overwrite=overwrite
        )
        current_app.logger.info("Uploaded %s as matrix %s", file.filename, name)
        return jsonify(generate_response(data=matrix, message='Matrix uploaded successfully')), 201
    except Exception as e:
        return error_response(e)

@api_bp.route('/matrices/<name>', methods=['GET'])
def get_matrix(name):
    """Get a matrix with its non-zero elements"""
    try:
        include_dense = is_truthy(request.args.get('dense', 'false'))
        matrix = get_matrix_service().describe_matrix(name, include_dense=include_dense)
        return jsonify(generate_response(data=matrix)), 200
    except Exception as e:
        return error_response(e)

@api_bp.route('/matrices/<name>/text', methods=['GET'])
def download_matrix(name):
    """Download a matrix in the text format"""
    try:
        text = get_matrix_service().get_matrix_text(name)
        return Response(
            text,
            mimetype='text/plain',
            headers={'Content-Disposition': f'attachment; filename={name}.txt'}
        )
    except Exception as e:
        return error_response(e)

@api_bp.route('/matrices/<name>', methods=['DELETE'])
def delete_matrix(name):
    """Delete a matrix"""
    try:
        get_matrix_service().delete_matrix(name)
        return jsonify(generate_response(message='Matrix deleted successfully')), 200
    except Exception as e:
        return error_response(e)

# Element Access
@api_bp.route('/matrices/<name>/elements/<int(signed=True):row>/<int(signed=True):col>', methods=['GET'])
def get_element(name, row, col):
    """Get a single element"""
    try:
        element = get_matrix_service().get_element(name, row, col)
        return jsonify(generate_response(data=element)), 200
    except Exception as e:
        return error_response(e)

@api_bp.route('/matrices/<name>/elements/<int(signed=True):row>/<int(signed=True):col>', methods=['PUT'])
def set_element(name, row, col):
    """Set a single element; a value of 0 removes it"""
    try:
        data = request.get_json(silent=True)
        if data is None:
            return jsonify(generate_response(False, error='No data provided')), 400

        element = get_matrix_service().set_element(name, row, col, data)
        return jsonify(generate_response(data=element, message='Element updated successfully')), 200
    except Exception as e:
        return error_response(e)

# Operations
@api_bp.route('/operations', methods=['POST'])
def run_operation():
    """Add, subtract or multiply two stored matrices"""
    try:
        data = request.get_json(silent=True)
        if not data:
            return jsonify(generate_response(False, error='No data provided')), 400

        result = get_matrix_service().run_operation(data)
        status = 201 if result['name'] else 200
        return jsonify(generate_response(data=result)), status
    except Exception as e:
        return error_response(e)

@api_bp.route('/matrices/<name>/transpose', methods=['POST'])
def transpose_matrix(name):
    """Transpose a stored matrix"""
    try:
        result = get_matrix_service().transpose(name, request.get_json(silent=True))
        status = 201 if result['name'] else 200
        return jsonify(generate_response(data=result)), status
    except Exception as e:
        return error_response(e)

# Storage Statistics Endpoint
@api_bp.route('/storage/stats', methods=['GET'])
def get_storage_stats():
    """Get storage statistics"""
    try:
        stats = get_matrix_service().get_storage_stats()
        return jsonify(generate_response(data=stats)), 200
    except Exception as e:
        return error_response(e)
