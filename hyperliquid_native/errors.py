"""Exception hierarchy for the Hyperliquid native signer.

This module defines the public exception hierarchy for the entire package. All
exceptions raised by this library inherit from BaseError.

Exception Hierarchy
-------------------
BaseError
├── ExchangeError - API server returned an error response
│   └── HttpError - non-2XX status, carries status code and raw body
├── TransportError - Network/protocol-level errors during transmission
└── ValidationError - Client-side input validation failures
    ├── EncodingError - value cannot be encoded
    ├── InvalidKeyError - malformed private key
    └── TypedDataError - malformed typed-data definition or value
"""


class BaseError(Exception):
    """Base exception for all hyperliquid_native errors.

    All exceptions raised by this library inherit from this class, allowing users
    to catch all package errors with a single except clause.

    This exception should not be raised directly. Use one of the specific subclasses
    instead (ExchangeError, TransportError, ValidationError).
    """

    pass


# ============================================================================
# EXCHANGE ERROR
# ============================================================================


class ExchangeError(BaseError):
    """Exception raised when the API server returns an error response.

    ExchangeError indicates that:
    - The network connection succeeded
    - The request was properly formatted and transmitted
    - A server processed the request and returned an error response
    """

    pass


class HttpError(ExchangeError):
    """Raised when response status from exchange is not 2XX."""

    status_code: int
    body: str
    message: str

    def __init__(self, status_code: int, body: str, message: str | None = None):
        """Initialize an HttpError.

        Args:
            status_code: The HTTP status code returned by the server.
            body: The raw response body, decoded as text.
            message: Description of the HTTP error.

        """
        self.status_code = status_code
        self.body = body
        self.message = (
            message
            if message is not None
            else f"HTTP error! status: {status_code}, body: {body}"
        )
        super().__init__(self.message)


## 5xx status errors


class InternalServerError(HttpError):
    """Raised when the server returns a 500 Internal Server Error."""

    pass


class BadGateway(HttpError):
    """Raised when the server returns a 502 Bad Gateway error."""

    pass


class ServiceUnavailable(HttpError):
    """Raised when the server returns a 503 Service Unavailable error."""

    pass


class GatewayTimeout(HttpError):
    """Raised when the server returns a 504 Gateway Timeout error."""

    pass


## 4xx status errors


class BadRequest(HttpError):
    """Raised when the server returns a 400 Bad Request error."""

    pass


class Unauthorized(HttpError):
    """Raised when the server returns a 401 Unauthorized error."""

    pass


class Forbidden(HttpError):
    """Raised when the server returns a 403 Forbidden error."""

    pass


class NotFound(HttpError):
    """Raised when the server returns a 404 Not Found error."""

    pass


class RateLimited(HttpError):
    """Raised when the server returns a 429 Rate Limited error."""

    pass


# ============================================================================
# TRANSPORT ERROR
# ============================================================================


class TransportError(BaseError):
    """Exception raised for errors in the process of transporting data to/from the API server.

    TransportError indicates that:
    - The error occurred in the process of transporting data
    - Valid application-level data was not successfully exchanged
    - The error could be transient and may succeed on retry

    This package never retries. Retry policy belongs to the caller or to a
    custom executor.
    """

    pass


class HttpConnectionError(TransportError):
    """Raised when a connection cannot be established or is lost."""

    def __init__(self, message: str, url: str | None = None):
        """Initialize an HttpConnectionError.

        Args:
            message: Description of the connection error.
            url: The URL that failed to connect, if available.

        """
        self.message = message
        self.url = url
        if url:
            super().__init__(f"{message} (url: {url})")
        else:
            super().__init__(message)


class TransportTimeoutError(TransportError):
    """Raised when a request or connection times out."""

    def __init__(self, message: str, timeout_seconds: float | None = None):
        """Initialize a TransportTimeoutError.

        Args:
            message: Description of the timeout error.
            timeout_seconds: The timeout duration in seconds, if available.

        """
        self.message = message
        self.timeout_seconds = timeout_seconds
        if timeout_seconds:
            super().__init__(f"{message} (timeout: {timeout_seconds}s)")
        else:
            super().__init__(message)


class DeserializationError(TransportError):
    """Raised when response data cannot be deserialized/decoded."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class SerializationError(TransportError):
    """Raised when request data cannot be serialized/encoded."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# ============================================================================
# VALIDATION ERROR
# ============================================================================


class ValidationError(BaseError):
    """Exception raised for client-side input validation failures.

    ValidationError indicates that:
    - No network request was attempted
    - The error is due to invalid input from the caller
    - The error can be fixed by correcting the input parameters
    """

    pass


class EncodingError(ValidationError):
    """Raised when a value has a shape the byte encoder cannot represent."""

    pass


class InvalidKeyError(ValidationError):
    """Raised when a private key is malformed or outside the secp256k1 range."""

    pass


class TypedDataError(ValidationError):
    """Base class for errors in typed structured data definitions and values."""

    pass


class UnsupportedTypeError(TypedDataError):
    """Raised when a field type string is neither atomic nor declared."""

    def __init__(self, type_name: str, message: str | None = None):
        self.type_name = type_name
        super().__init__(message or f"Unsupported type: '{type_name}'")


class MissingTypeError(UnsupportedTypeError):
    """Raised when a struct type is referenced but absent from the type dictionary."""

    def __init__(self, type_name: str):
        super().__init__(type_name, f"Type {type_name} not found in types")


class LengthMismatchError(TypedDataError):
    """Raised when a fixed-size array or bytesN value has the wrong length."""

    def __init__(self, type_name: str, expected: int, received: int):
        self.type_name = type_name
        self.expected = expected
        self.received = received
        super().__init__(
            f"Invalid length for {type_name}: expected {expected}, received {received}"
        )


class IntegerRangeError(TypedDataError):
    """Raised for an invalid integer width or a value outside that width."""

    pass
