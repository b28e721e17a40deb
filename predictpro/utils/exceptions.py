# predictpro/utils/exceptions.py
from flask_restful import Api
from werkzeug.exceptions import HTTPException

class APIError(Exception):
    def __init__(self, message, status_code=400):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self):
        return {"error": self.message}

class NotFoundError(APIError):
    def __init__(self, message="Resource not found"):
        super().__init__(message, status_code=404)

class ForbiddenError(APIError):
    def __init__(self, message="Access forbidden"):
        super().__init__(message, status_code=403)

class ConflictError(APIError):
    def __init__(self, message):
        super().__init__(message, status_code=409)

class UpstreamError(APIError):
    """The generative AI provider failed or returned unusable output."""
    def __init__(self, message):
        super().__init__(message, status_code=502)

class ErrorHandlingApi(Api):
    """Api that leaves every error, reqparse aborts included, to the app's error handlers."""

    def handle_error(self, e):
        raise e

def _http_error_body(error):
    # reqparse aborts carry {'message': {field: help}} in error.data
    message = (getattr(error, 'data', None) or {}).get('message')
    if isinstance(message, dict):
        return {"error": "; ".join(str(text) for text in message.values()), "fields": message}
    return {"error": message or error.description}

def handle_api_error(error):
    if isinstance(error, HTTPException):
        return _http_error_body(error), error.code
    response = {"error": str(error)} if not hasattr(error, 'to_dict') else error.to_dict()
    status_code = getattr(error, 'status_code', 500)
    return response, status_code
