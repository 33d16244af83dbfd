"""
Middleware package exports.
"""

from middleware.request_id import RequestIDMiddleware, RequestIDLogFilter, get_request_id

__all__ = ["RequestIDMiddleware", "RequestIDLogFilter", "get_request_id"]
