"""
Middlewares HTTP.
"""
from .error_handler import ErrorHandlerMiddleware

__all__ = ["ErrorHandlerMiddleware"]
