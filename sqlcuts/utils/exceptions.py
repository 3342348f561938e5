from __future__ import annotations


class ScopeError(Exception):
    """
    Exception raised when a security-scoped grant is used incorrectly.
    """

    def __init__(self, path: str, message: str) -> None:
        """
        Initialize ScopeError.

        Args:
            path (str): The path of the handle involved.
            message (str): What went wrong with the grant.
        """
        self.path: str = path
        super().__init__(f"{message}: {path}")


class ConfigError(Exception):
    """
    Exception raised when settings cannot be read or are invalid.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
