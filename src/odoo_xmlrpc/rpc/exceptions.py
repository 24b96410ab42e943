"""
Odoo XML-RPC Error Handling

Typed exceptions for configuration and precondition violations, plus the
mapping of XML-RPC faults and HTTP transport failures to them.

Error Code Reference (Odoo XML-RPC):
- Fault 1: UserError / ValidationError
- Fault 2: MissingError (record not found)
- Fault 3: AccessDenied (authentication)
- Fault 4: AccessError (permission denied)
"""

import re
from typing import Any
from xml.parsers.expat import ExpatError
from xmlrpc.client import Fault, ResponseError  # nosec B411 - parses replies from the configured Odoo server

import httpx

_ODOO_EXCEPTION_RE = re.compile(
    r"\b(?:UserError|ValidationError|MissingError|AccessError|AccessDenied):[ \t]*(.*)"
)


class OdooError(Exception):
    """Root of every error raised by the client, carrying a stable code."""

    error_code: str = "ODOO_ERROR"
    is_retryable: bool = False

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        """Code, message and details as one flat dict (for CLI or JSON output)."""
        return {"code": self.error_code, "message": self.message, **self.details}

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


# =============================================================================
# Configuration / precondition errors
# =============================================================================


class MissingCredentialsError(OdooError):
    """Database, username or password not set before login."""

    error_code = "MISSING_CREDENTIALS"


class InvalidCredentialsError(OdooError):
    """Server answered the login with uid 0."""

    error_code = "INVALID_CREDENTIALS"


class LoginFailedError(OdooError):
    """Explicit login through the client facade did not succeed."""

    error_code = "LOGIN_FAILED"


class NotAuthenticatedError(OdooError):
    """Object or report call attempted without an active session."""

    error_code = "NOT_AUTHENTICATED"


class UnknownChannelError(OdooError):
    """Channel name is not one of db, common, object, report."""

    error_code = "UNKNOWN_CHANNEL"


class ArityError(OdooError):
    error_code = "ARITY_ERROR"


class InvalidCriteriaError(OdooError):
    error_code = "INVALID_CRITERIA"


class UnexpectedResultShapeError(OdooError):
    """Server returned a scalar where a list or struct was expected."""

    error_code = "UNEXPECTED_RESULT_SHAPE"


# =============================================================================
# Transport faults
# =============================================================================


class TransportFaultError(OdooError):
    """Failure reported by the server or by the HTTP transport."""

    error_code = "TRANSPORT_FAULT"


class OdooAccessDeniedError(TransportFaultError):
    """Authentication failed - invalid credentials."""

    error_code = "ACCESS_DENIED"


class OdooPermissionError(TransportFaultError):
    """User lacks permission to access/modify the resource."""

    error_code = "PERMISSION_DENIED"


class OdooRecordNotFoundError(TransportFaultError):
    """Requested record does not exist."""

    error_code = "RECORD_NOT_FOUND"


class OdooValidationError(TransportFaultError):
    """Data validation failed (UserError, ValidationError)."""

    error_code = "VALIDATION_ERROR"


class OdooConnectionError(TransportFaultError):
    """Network or connection error communicating with Odoo."""

    error_code = "CONNECTION_ERROR"
    is_retryable = True


class OdooTimeoutError(OdooConnectionError):
    """Request timed out."""

    error_code = "CONNECTION_TIMEOUT"


class OdooServerError(TransportFaultError):
    """HTTP error status or malformed XML-RPC payload."""

    error_code = "SERVER_ERROR"
    is_retryable = True


class OdooMarshalError(TransportFaultError):
    """Call parameters cannot be encoded as XML-RPC."""

    error_code = "MARSHAL_ERROR"


def map_odoo_fault(fault: Fault) -> TransportFaultError:
    """
    Map XML-RPC Fault to appropriate TransportFaultError subclass.

    Old servers report every fault with code 1 and put the exception
    class in the fault string, so the string is checked as well.

    Args:
        fault: XML-RPC Fault from Odoo

    Returns:
        Appropriate TransportFaultError subclass
    """
    fault_code = fault.faultCode
    fault_string = str(fault.faultString)

    message = _extract_error_message(fault_string)
    details = {"fault_code": fault_code, "original_fault": fault_string}

    if fault_code == 3 or "AccessDenied" in fault_string:
        return OdooAccessDeniedError(message, **details)

    if fault_code == 4 or "AccessError" in fault_string:
        return OdooPermissionError(message, **details)

    if fault_code == 2 or "MissingError" in fault_string:
        return OdooRecordNotFoundError(message, **details)

    if fault_code == 1 or "UserError" in fault_string or "ValidationError" in fault_string:
        return OdooValidationError(message, **details)

    error = TransportFaultError(f"Odoo fault (code {fault_code}): {message}", **details)
    error.error_code = "UNKNOWN_FAULT"
    return error


def map_transport_error(error: Exception) -> TransportFaultError:
    """
    Map HTTP and payload errors to appropriate TransportFaultError.

    Args:
        error: Original exception raised by httpx or xmlrpc.client,
            including encoding failures of the call parameters

    Returns:
        Appropriate TransportFaultError subclass
    """
    if isinstance(error, httpx.TimeoutException):
        return OdooTimeoutError(
            f"Connection timed out: {error}",
            original_error=str(error),
        )

    if isinstance(error, httpx.ConnectError):
        return OdooConnectionError(
            "Connection refused - Odoo server may be down",
            original_error=str(error),
        )

    if isinstance(error, httpx.HTTPStatusError):
        return OdooServerError(
            f"HTTP {error.response.status_code} from {error.request.url}",
            status_code=error.response.status_code,
        )

    if isinstance(error, (ResponseError, ExpatError)):
        return OdooServerError(
            f"Malformed XML-RPC response: {error}",
            original_error=str(error),
        )

    if isinstance(error, (TypeError, OverflowError)):
        return OdooMarshalError(
            f"Cannot marshal call parameters: {error}",
            original_error=str(error),
        )

    return OdooConnectionError(
        f"Network error: {error}",
        original_error=str(error),
    )


def _extract_error_message(fault_string: str) -> str:
    """Pick the line of a fault string worth showing to the caller."""
    match = _ODOO_EXCEPTION_RE.search(fault_string)
    if match and match.group(1).strip():
        return match.group(1).strip()

    lines = [line.strip() for line in fault_string.splitlines() if line.strip()]
    if not lines:
        return fault_string

    # a server traceback ends with the raised exception
    if lines[0].startswith("Traceback "):
        return lines[-1]
    return lines[0]
