"""Error handling decorator for CLI commands"""

import logging
import sys
from functools import wraps
from typing import Callable

from ..utils.output import print_sabaccui_error
from ...api.exceptions import SabaccUIError, TemplateStepError

logger = logging.getLogger(__name__)


def handle_errors(func: Callable) -> Callable:
    """Decorator that turns library errors into a red message and exit code 1

    Args:
        func: Command function to decorate

    Returns:
        Decorated function
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except TemplateStepError as e:
            logger.debug(f"Step '{e.step}' failed", exc_info=e.cause)
            print_sabaccui_error(e)
            sys.exit(1)
        except SabaccUIError as e:
            print_sabaccui_error(e)
            sys.exit(1)

    return wrapper
