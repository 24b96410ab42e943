"""
XML-RPC Endpoint

One endpoint per channel URL. Marshalling is done by xmlrpc.client, the HTTP
round trip by a shared httpx.Client. The last request and response are kept
so they can be rendered in trace logs.
"""
import xmlrpc.client  # nosec B411 - parses replies from the configured Odoo server
from typing import Any, NamedTuple
from xml.parsers.expat import ExpatError

import httpx

from .exceptions import map_odoo_fault, map_transport_error


class LastRequest(NamedTuple):
    method: str
    params: tuple


class XmlRpcEndpoint:
    """
    Transport handle for a single XML-RPC URL.

    Error Handling: faults, HTTP failures and parameters xmlrpc.client
    cannot encode are raised as
    TransportFaultError subclasses, chained to the original exception.
    """

    def __init__(
        self,
        url: str,
        http_client: httpx.Client,
        allow_none: bool = True,
        use_builtin_types: bool = False,
    ):
        self.url = url
        self._http = http_client
        self._allow_none = allow_none
        self._use_builtin_types = use_builtin_types

        self.last_request: LastRequest | None = None
        self.last_response: Any = None

    def call(self, method: str, params: tuple | list = ()) -> Any:
        """Send ``method(*params)`` and return the decoded return value."""
        params = tuple(params)
        self.last_request = LastRequest(method, params)
        self.last_response = None

        try:
            body = xmlrpc.client.dumps(params, method, allow_none=self._allow_none)
        except (TypeError, OverflowError) as e:
            raise map_transport_error(e) from e

        try:
            response = self._http.post(self.url, content=body.encode("utf-8"))
            response.raise_for_status()
            result, _ = xmlrpc.client.loads(
                response.content, use_builtin_types=self._use_builtin_types
            )
        except xmlrpc.client.Fault as e:
            raise map_odoo_fault(e) from e
        except (httpx.HTTPError, xmlrpc.client.ResponseError, ExpatError) as e:
            raise map_transport_error(e) from e

        self.last_response = result[0] if len(result) == 1 else result
        return self.last_response

    def __repr__(self) -> str:
        return f"XmlRpcEndpoint({self.url!r})"
