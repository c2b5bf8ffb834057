"""
Custom exceptions for c8client.

Every public operation either returns a value or raises exactly one of
the exceptions below. All of them derive from C8ClientError, which keeps
compatibility with RuntimeError.
"""

from typing import Any, Dict, Optional


class C8ClientError(RuntimeError):
    """
    Base exception for c8client errors.

    Attributes:
        message: Error message
        context: Optional dictionary with additional context (collection,
                 host, method, path, etc.)
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            context: Optional dictionary with additional context information
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class ConfigurationError(C8ClientError):
    """
    Raised when client configuration is invalid or missing.

    Attributes:
        message: Error message
        config_key: Configuration key that caused the error (if available)
        config_value: Configuration value that caused the error (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if config_key:
            context["config_key"] = config_key
        if config_value is not None:
            context["config_value"] = config_value
        super().__init__(message, context=context)
        self.config_key = config_key
        self.config_value = config_value


class TransportError(C8ClientError):
    """
    Raised when no configured host could be reached.

    Network-level failures (refused connections, timeouts, DNS errors) are
    retried against the remaining hosts first; this exception surfaces only
    once every candidate has failed.

    Attributes:
        message: Error message
        hosts: Hosts that were attempted, in order
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        hosts: Optional[list] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if hosts:
            context["hosts"] = hosts
        super().__init__(message, context=context)
        self.hosts = list(hosts or [])


class ConnectionClosedError(TransportError):
    """Raised when a request is issued on a connection that was closed."""


class ServerError(C8ClientError):
    """
    Raised for an HTTP response that reports an error.

    When the server sends the standard error payload
    (``{"error": true, "errorNum": ..., "errorMessage": ..., "code": ...}``)
    ``error_num`` carries the numeric error code. Error statuses without a
    payload (for example a HEAD request answered with 404) have
    ``error_num`` set to None.

    Attributes:
        message: Error message reported by the server
        status_code: HTTP status code of the response
        error_num: Server error number (if the payload carried one)
        response: The ResponseEnvelope that produced this error
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        error_num: Optional[int] = None,
        response: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        context["status_code"] = status_code
        if error_num is not None:
            context["error_num"] = error_num
        super().__init__(message, context=context)
        self.status_code = status_code
        self.error_num = error_num
        self.response = response

    @property
    def code(self) -> int:
        """HTTP status code, named as in the server's error payload."""
        return self.status_code


class InvalidHandleError(C8ClientError, ValueError):
    """Raised when a document or index handle cannot be resolved to an id."""

    def __init__(self, message: str, handle: Any = None) -> None:
        super().__init__(message, context={"handle": repr(handle)})
        self.handle = handle


class InvalidArgumentError(C8ClientError, ValueError):
    """Raised when an overloaded call cannot be disambiguated."""


class ExhaustedCursorError(C8ClientError):
    """Raised when ``next()`` is called on a drained cursor."""


class UnsupportedOperationError(C8ClientError):
    """
    Raised when an operation is not available for the server version.

    Attributes:
        operation: Name of the operation that was called
        c8_major: Major server version the connection is configured for
    """

    def __init__(self, operation: str, c8_major: int) -> None:
        super().__init__(
            f"'{operation}' is not supported by server version {c8_major}.x",
            context={"operation": operation, "c8_major": c8_major},
        )
        self.operation = operation
        self.c8_major = c8_major


def is_c8_error(error: BaseException) -> bool:
    """Return True if ``error`` came from a server error payload."""
    return isinstance(error, ServerError) and error.error_num is not None
