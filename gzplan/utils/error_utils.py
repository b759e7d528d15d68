"""
Error handling utilities for gzplan.

This module provides centralized error handling and logging for the planning
engine. It includes the project exception classes and a decorator for
consistent error reporting across the codebase.
"""

import os
import traceback
import logging
from functools import wraps
import sys
from datetime import datetime

# Configure logging; file handler only when requested and not on serverless
_handlers = [logging.StreamHandler(sys.stdout)]
if os.getenv("GZPLAN_LOG_FILE") and not os.getenv("VERCEL"):
    _handlers.append(logging.FileHandler(os.getenv("GZPLAN_LOG_FILE")))

logging.basicConfig(
    level=os.getenv("GZPLAN_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=_handlers,
)

logger = logging.getLogger(__name__)


class GZPlanError(Exception):
    """Base exception class for planning engine errors"""

    def __init__(self, message, details=None):
        self.message = message
        self.details = details
        self.timestamp = datetime.now()
        super().__init__(self.message)


class InvalidInputError(GZPlanError):
    """
    A founder-supplied value could not be turned into a usable number.

    Raised only by ``normalize_amount``. Carries the field path so callers can
    point the user at the offending input.
    """

    def __init__(self, field, value, reason):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid input for '{field}': {reason}",
            {"field": field, "value": repr(value), "reason": reason},
        )

    def to_dict(self):
        return {"field": self.field, "value": repr(self.value), "reason": self.reason}


def error_handler(func):
    """Decorator for handling errors and providing detailed information"""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except GZPlanError:
            raise
        except Exception as e:
            exc_type, exc_value, exc_tb = sys.exc_info()
            tb = traceback.extract_tb(exc_tb)

            # Get the most relevant parts of the traceback
            error_location = f"{tb[-1].filename}:{tb[-1].lineno}"
            error_function = tb[-1].name

            error_details = {
                "error_type": exc_type.__name__,
                "location": error_location,
                "function": error_function,
                "arguments": {"args": str(args), "kwargs": str(kwargs)},
                "traceback": traceback.format_exc(),
            }

            logger.error(f"Error in {error_location} - {error_function}: {str(e)}")
            logger.debug(f"Detailed error information: {error_details}")

            raise GZPlanError(
                f"Error in {error_function} at {error_location}: {str(e)}",
                error_details,
            ) from e

    return wrapper
