from .catchall import CatchAllExceptionMiddleware
from .timeout import HandlerTimeoutMiddleware

__all__ = ["CatchAllExceptionMiddleware", "HandlerTimeoutMiddleware"]
