"""Logging module for Roadtripper."""

import json
from datetime import datetime
from typing import Optional, Callable

LEVELS = ("DEBUG", "INFO", "WARN", "ERROR", "FATAL")


class Logger:
    """Logs navigation progress to stdout and, optionally, a file"""

    def __init__(self, log_path: Optional[str] = None, callback: Optional[Callable] = None,
                 verbose: bool = False, echo: bool = True):
        self.log_path = log_path
        self.callback = callback
        self.verbose = verbose
        self.echo = echo
        self.file = None
        if log_path:
            self.file = open(log_path, "a", encoding="utf-8")
            self._write_header()

    def _write_header(self):
        if self.file:
            self.file.write(f"\n{'='*60}\n")
            self.file.write(f"Roadtripper Log - {datetime.now().isoformat()}\n")
            self.file.write(f"{'='*60}\n\n")
            self.file.flush()

    def log(self, message: str, data: Optional[dict] = None, level: str = "INFO"):
        """Log a message with optional structured data"""
        if level == "DEBUG" and not self.verbose:
            return
        timestamp = datetime.now().isoformat()
        line = f"[{timestamp}] {level} {message}"
        if data:
            line += f" | {json.dumps(data, default=str)}"
        if self.echo:
            print(line)
        if self.file:
            self.file.write(line + "\n")
            self.file.flush()
        if self.callback:
            self.callback(level, message, data)

    def debug(self, message: str, data: Optional[dict] = None):
        self.log(message, data, level="DEBUG")

    def info(self, message: str, data: Optional[dict] = None):
        self.log(message, data, level="INFO")

    def warn(self, message: str, data: Optional[dict] = None):
        self.log(message, data, level="WARN")

    def error(self, message: str, data: Optional[dict] = None):
        self.log(message, data, level="ERROR")

    def fatal(self, message: str, data: Optional[dict] = None):
        self.log(message, data, level="FATAL")

    def close(self):
        if self.file:
            self.file.close()
            self.file = None
