from typing import Any, Optional

__all__ = (
    "ConfigFileNotFoundError",
    "ConfigParseError",
    "ImproperConfigurationError",
    "MissingDependencyError",
    "MissingParameterError",
    "ParameterError",
    "SQLBindError",
    "SerializationError",
    "UnknownDriverError",
)


class SQLBindError(Exception):
    """Base exception class from which all sqlbind exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLBindError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class MissingDependencyError(SQLBindError, ImportError):
    """Missing optional dependency.

    This exception is raised only when a module depends on a dependency that has not been installed.
    """

    def __init__(self, package: str, install_package: Optional[str] = None) -> None:
        super().__init__(
            f"Package {package!r} is not installed but required. You can install it by running "
            f"'pip install sqlbind[{install_package or package}]' to install sqlbind with the required extra "
            f"or 'pip install {install_package or package}' to install the package separately",
        )


class ImproperConfigurationError(SQLBindError):
    """Improper Configuration error.

    Raised at start-up when a driver, placeholder or route definition cannot be used.
    """


class UnknownDriverError(ImproperConfigurationError):
    """Raised in strict mode when a driver identifier has no placeholder convention."""

    driver: str
    suggestions: "list[str]"

    def __init__(self, driver: str, suggestions: "Optional[list[str]]" = None) -> None:
        self.driver = driver
        self.suggestions = suggestions or []
        message = f"Unknown database driver {driver!r}"
        if self.suggestions:
            message += f". Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)


# -- Route configuration errors --
class ConfigFileNotFoundError(SQLBindError):
    """Route configuration file not found."""

    def __init__(self, name: str, path: "Optional[str]" = None) -> None:
        """Initialize with file information.

        Args:
            name: Base name or description of the configuration that was looked up.
            path: Optional paths that were tried.
        """
        message = f"Config file not found: {name} (looking for {path})" if path else f"Config file not found: {name}"
        super().__init__(message)
        self.name = name
        self.path = path


class ConfigParseError(SQLBindError):
    """Error parsing a route configuration file."""

    def __init__(self, source: str, message: str, line: "Optional[int]" = None) -> None:
        """Initialize with parsing error details.

        Args:
            source: Name of the file (or ``<string>``) being parsed.
            message: Description of the problem.
            line: 1-based line number where the problem was found, when known.
        """
        location = f"{source}:{line}" if line is not None else source
        super().__init__(f"{location}: {message}")
        self.source = source
        self.line = line


# -- SQL Parameter Errors --
class ParameterError(SQLBindError):
    """Base class for parameter-related errors."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        """Initialize with optional SQL context."""
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class MissingParameterError(ParameterError):
    """Raised when required parameters are missing."""

    missing: "tuple[str, ...]"

    def __init__(self, missing: "tuple[str, ...]", sql: Optional[str] = None) -> None:
        self.missing = missing
        super().__init__(f"Missing required parameters: {', '.join(repr(name) for name in missing)}", sql=sql)


class SerializationError(SQLBindError):
    """Encoding or decoding of an object failed."""
