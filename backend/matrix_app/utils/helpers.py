from datetime import datetime, timezone
from werkzeug.utils import secure_filename

MAX_NAME_LENGTH = 64

def validate_matrix_name(name):
    """Validate a matrix name; names double as file names on disk"""
    if not name or not isinstance(name, str):
        return False, "Matrix name is required"

    if len(name) > MAX_NAME_LENGTH:
        return False, f"Matrix name must be at most {MAX_NAME_LENGTH} characters long"

    if secure_filename(name) != name:
        return False, "Matrix name may only contain letters, digits, '.', '-' and '_'"

    return True, "Matrix name is valid"

def name_from_filename(filename):
    """Derive a matrix name from an uploaded file name"""
    safe = secure_filename(filename)
    if safe.lower().endswith('.txt'):
        safe = safe[:-len('.txt')]
    return safe

def utc_now():
    return datetime.now(timezone.utc)

def generate_response(success=True, data=None, message=None, error=None, **extra):
    """
    Build the JSON envelope shared by every API response.

    Keys whose value is None are left out; `extra` carries endpoint
    specific fields such as `count` or `details`.
    """
    response = {'success': success, 'timestamp': utc_now().isoformat()}
    fields = dict(data=data, message=message, error=error, **extra)
    response.update((key, value) for key, value in fields.items() if value is not None)
    return response
