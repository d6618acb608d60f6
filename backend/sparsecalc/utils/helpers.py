from datetime import datetime, timezone


def format_datetime(dt):
    """Format datetime to ISO string"""
    if isinstance(dt, datetime):
        return dt.isoformat()
    return dt


def decode_upload(file_storage, encoding='utf-8'):
    """Read an uploaded file into text"""
    raw = file_storage.read()
    if isinstance(raw, bytes):
        return raw.decode(encoding)
    return raw


def generate_response(success=True, data=None, message=None, error=None, details=None):
    """Generate standardized API response"""
    response = {
        'success': success,
        'timestamp': format_datetime(datetime.now(timezone.utc))
    }

    if data is not None:
        response['data'] = data

    if message:
        response['message'] = message

    if error:
        response['error'] = error

    if details is not None:
        response['details'] = details

    return response
