"""Core types shared by every layer.

``aksgate.core.config`` depends on the resolver's profile table and is
imported by path, not re-exported here.
"""

from .errors import ErrorCode
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
