"""Odoo / OpenERP client over XML-RPC."""

from .client import Credentials, OdooXmlRpc
from .config import ClientOptions, Settings
from .criteria import Criteria
from .rpc import (
    Channel,
    Connection,
    OdooError,
    RequestLogFormatter,
)

__version__ = "0.1.0"

__all__ = [
    "OdooXmlRpc",
    "Credentials",
    "Criteria",
    "Connection",
    "Channel",
    "RequestLogFormatter",
    "ClientOptions",
    "Settings",
    "OdooError",
]
