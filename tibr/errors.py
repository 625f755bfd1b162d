"""
Error types raised by tibr.

Library code raises these; the CLI turns them into a message and an exit status.
"""


class TibrError(Exception):
    """Base class for every error tibr reports to the user."""


class MissingInputError(TibrError):
    """An input file (schema, main.ts, dictionary, migrations dir) does not exist."""

    def __init__(self, path, message=None):
        self.path = path
        super().__init__(message or f"Not found: {path}")


class MalformedInputError(TibrError):
    """An input file exists but lacks the expected structure."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class ConfigNotFoundError(TibrError):
    """No .tibrrc / tibr.json could be resolved."""


class InferenceError(TibrError):
    """The inference model returned nothing usable."""


class CommandFailedError(TibrError):
    """An external command exited non-zero."""

    def __init__(self, command: str, returncode: int):
        self.command = command
        self.returncode = returncode
        super().__init__(f"'{command}' exited with code {returncode}")
