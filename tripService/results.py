def ok(**payload):
    return {'success': True, **payload}


def fail(message, status_code=400):
    return {'success': False, 'message': message, 'status_code': status_code}
