import logging
import sys
from pathlib import Path

from colorama import Fore, Style

LOGGER_NAME = "azurestorage"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ConsoleFormatter(logging.Formatter):
    """Coloured `[LOG]` / `[ERROR]` lines for the terminal."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        if record.levelno >= logging.ERROR:
            return f"{Fore.RED}[ERROR] {line}{Style.RESET_ALL}"
        return f"{Fore.GREEN}[LOG] {line}{Style.RESET_ALL}"


class OperationLogger:
    """Append-only operations log written to the console and to a file.

    Only two levels exist: ``log`` for progress and ``error`` for the single
    terminal failure of an invocation.
    """

    def __init__(self, log_file: Path, azure_log_level: int = logging.WARNING):
        self.log_file = Path(log_file)
        self._logger = setup_logging(self.log_file, azure_log_level)

    def log(self, message: str) -> None:
        self._logger.info(message)

    def error(self, message: str) -> None:
        self._logger.error(message)

    def close(self) -> None:
        for handler in list(self._logger.handlers):
            handler.close()
            self._logger.removeHandler(handler)


def setup_logging(log_file: Path, azure_log_level: int = logging.WARNING) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(ConsoleFormatter("%(asctime)s - %(message)s", datefmt=DATE_FORMAT))
    logger.addHandler(console)

    # Opened lazily so that commands which never log do not create the file.
    file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8", delay=True)
    file_handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s", datefmt=DATE_FORMAT))
    logger.addHandler(file_handler)

    azure_loggers = [
        "azure",
        "azure.core.pipeline",
        "azure.identity",
        "azure.storage.blob",
        "azure.mgmt",
    ]
    for logger_name in azure_loggers:
        logging.getLogger(logger_name).setLevel(azure_log_level)
    return logger
