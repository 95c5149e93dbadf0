"""A module that defines a decorator for the seirdyn global logger."""

import logging
import os
from datetime import datetime
from functools import wraps
from inspect import getframeinfo, stack


def log_decorator(_func=None):
    """Outermost log decorator function.

    Allows the decorator to be used either as `@log_decorator()` or as
    `@log_decorator`, or called directly on the function to wrap.

    Parameters
    ----------
    _func : function, optional
        the function to wrap when used without parentheses. Defaults to None.
    """

    def log_decorator_info(func):
        @wraps(func)
        def log_decorator_wrapper(*args, **kwargs):
            """Log arguments, execution time and return value of `func`.

            Exceptions raised by `func` are logged and raised again.
            """
            logger = logging.getLogger("seirdyn")
            if not logger.isEnabledFor(logging.INFO):
                return func(*args, **kwargs)

            formatted_arguments = ", ".join(
                [repr(a) for a in args]
                + [f"{k}={v!r}" for k, v in kwargs.items()]
            )
            # report the decorated function and its caller, not this wrapper
            py_file_caller = getframeinfo(stack()[1][0])
            extra_args = {
                "func_name_override": func.__name__,
                "file_name_override": os.path.basename(
                    py_file_caller.filename
                ),
            }

            start_time = datetime.now()
            logger.info(
                f"Arguments: {formatted_arguments} - Begin function",
                extra=extra_args,
            )
            try:
                value = func(*args, **kwargs)
            except Exception as ex:
                logger.error(f"Exception: {ex}", extra=extra_args)
                raise

            execution_time = datetime.now() - start_time
            logger.info(f"Execution Time: {execution_time}", extra=extra_args)
            logger.info(
                f"Returned: - End function \n{value!r}", extra=extra_args
            )
            return value

        return log_decorator_wrapper

    if _func is None:
        return log_decorator_info
    else:
        return log_decorator_info(_func)
