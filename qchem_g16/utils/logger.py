"""
Logging setup for the qchem-g16 command.

Gaussian captures the external program's stdout into its own log, so the
console handler is optional. Errors always go to stderr, and records can
also be written to the message file Gaussian passes on the command line.
"""

import logging
import os
import re
import sys

LOG_FORMAT = "{asctime} - {levelname:6s} - [{name}] {message}"


class LogOnceFilter(logging.Filter):
    """
    Drop records whose message (timestamp excluded) was already logged.

    Gaussian may call the external program many times in one optimization
    with identical settings; repeated configuration messages are shown once
    per process.
    """

    def __init__(self):
        super().__init__()
        self.logged_messages = set()

    def filter(self, record):
        message = self.remove_timestamp(record.getMessage())
        if message in self.logged_messages:
            return False
        self.logged_messages.add(message)
        return True

    @staticmethod
    def remove_timestamp(message):
        return re.sub(
            r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2},\d{3} - ", "", message
        )


def create_logger(
    debug=False,
    folder=".",
    logfile=None,
    stream=True,
    disable=None,
):
    """
    Configure the root logger for a qchem-g16 run.

    Args:
        debug (bool, optional): Log at DEBUG level instead of INFO.
            Defaults to False.
        folder (str, optional): Directory `logfile` is relative to.
            Defaults to ".".
        logfile (str, optional): File that receives all records at the
            chosen level, typically Gaussian's message file. An absolute
            path ignores `folder`. Defaults to None.
        stream (bool, optional): Also log to stdout. Errors are sent to
            stderr regardless. Defaults to True.
        disable (list[str], optional): Logger names to silence.

    Returns:
        logging.Logger: The configured root logger.
    """
    for module in disable or []:
        logging.getLogger(module).disabled = True

    logger = logging.getLogger()
    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)
    logger.handlers = []
    logger.filters = []
    formatter = logging.Formatter(LOG_FORMAT, style="{")

    # filters sit on the handlers so records from module loggers reach them
    err_stream_handler = logging.StreamHandler(stream=sys.stderr)
    err_stream_handler.setLevel(logging.ERROR)
    err_stream_handler.setFormatter(formatter)
    err_stream_handler.addFilter(LogOnceFilter())
    logger.addHandler(err_stream_handler)

    if stream:
        stream_handler = logging.StreamHandler(stream=sys.stdout)
        stream_handler.setFormatter(formatter)
        stream_handler.addFilter(LogOnceFilter())
        logger.addHandler(stream_handler)

    if logfile:
        logfile_handler = logging.FileHandler(
            filename=os.path.join(folder, logfile)
        )
        logfile_handler.setLevel(level)
        logfile_handler.setFormatter(formatter)
        logfile_handler.addFilter(LogOnceFilter())
        logger.addHandler(logfile_handler)

    return logger
