from .result import Failure, Result, Success
from .timeouts import bounded

__all__ = ["Failure", "Result", "Success", "bounded"]
