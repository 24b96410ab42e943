"""XML-RPC connection, transport and error handling."""

from .connection import Channel, Connection, Session
from .endpoint import XmlRpcEndpoint
from .exceptions import (
    ArityError,
    InvalidCredentialsError,
    InvalidCriteriaError,
    LoginFailedError,
    MissingCredentialsError,
    NotAuthenticatedError,
    OdooAccessDeniedError,
    OdooConnectionError,
    OdooError,
    OdooMarshalError,
    OdooPermissionError,
    OdooRecordNotFoundError,
    OdooServerError,
    OdooTimeoutError,
    OdooValidationError,
    TransportFaultError,
    UnexpectedResultShapeError,
    UnknownChannelError,
    map_odoo_fault,
    map_transport_error,
)
from .formatter import RequestLogFormatter

__all__ = [
    "Channel",
    "Connection",
    "Session",
    "XmlRpcEndpoint",
    "RequestLogFormatter",
    # Exceptions
    "OdooError",
    "ArityError",
    "InvalidCredentialsError",
    "InvalidCriteriaError",
    "LoginFailedError",
    "MissingCredentialsError",
    "NotAuthenticatedError",
    "UnexpectedResultShapeError",
    "UnknownChannelError",
    "TransportFaultError",
    "OdooAccessDeniedError",
    "OdooConnectionError",
    "OdooMarshalError",
    "OdooPermissionError",
    "OdooRecordNotFoundError",
    "OdooServerError",
    "OdooTimeoutError",
    "OdooValidationError",
    # Utilities
    "map_odoo_fault",
    "map_transport_error",
]
