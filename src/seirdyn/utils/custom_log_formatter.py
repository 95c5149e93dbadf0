import logging


class CustomLogFormatter(logging.Formatter):
    """Log formatter honoring function and file name overrides.

    Records logged through `log_decorator` carry `func_name_override` and
    `file_name_override` attributes naming the decorated function and the
    file of its caller, this formatter writes them into `funcName` and
    `filename` before formatting. Records without them are formatted exactly
    like `logging.Formatter` would.

    Parameters
    ----------
    fmt : str, optional
        format string of the whole record, defaults to '%(message)s'.
    datefmt : str, optional
        format string of the date/time portion of the record.
    style : str, optional
        one of '%', '{' or '$'. Defaults to '%'.
    """

    def format(self, record):
        if hasattr(record, "func_name_override"):
            record.funcName = record.func_name_override
        if hasattr(record, "file_name_override"):
            record.filename = record.file_name_override
        return super(CustomLogFormatter, self).format(record)
