"""Human readable rendering of XML-RPC calls for trace logs."""

from pprint import pformat
from typing import Any

from .endpoint import XmlRpcEndpoint

MASK = "*****"


class RequestLogFormatter:
    """Render the last request/response of an endpoint, passwords masked."""

    def __init__(self, endpoint: XmlRpcEndpoint):
        self.endpoint = endpoint

    def format_request(self, channel: str) -> str:
        last = self.endpoint.last_request
        params = list(last.params) if last else []
        login_info = None

        if channel == "common":
            obj = ""
            method = last.method if last else ""
            if len(params) > 2:
                params[2] = MASK
        elif channel == "object":
            login_info = params[:3]
            obj = params[3] if len(params) > 3 else ""
            method = params[4] if len(params) > 4 else ""
            params = params[5:]
        elif channel == "db":
            obj, method, params = "db", "list", []
        else:
            return "Nothing..."

        return self._build_request_string(obj, method, login_info, params)

    def format_response(self) -> str:
        return "Response :\n" + render_value(self.endpoint.last_response)

    def format_fault(self, fault: Exception) -> str:
        message = getattr(fault, "message", None) or getattr(fault, "faultString", None) or str(fault)
        return "Response with Fault :\n" + render_value(message)

    @staticmethod
    def _build_request_string(obj: Any, method: Any, login_info: list | None, params: list) -> str:
        content = f"Call: {obj}:{method}"
        if login_info is not None:
            database = login_info[0] if login_info else ""
            uid = login_info[1] if len(login_info) > 1 else ""
            content += f" with database: {database} , uid: {uid} , pass: {MASK}"
        content += "\n"
        for count, param in enumerate(params, start=1):
            content += f"Arg {count} : {render_value(param)}\n"
        return content


def render_value(value: Any) -> str:
    """Render a value with an explicit type tag for scalars."""
    # bool first: it is a subclass of int
    if isinstance(value, bool):
        return "bool(true)" if value else "bool(false)"
    if isinstance(value, int):
        return f"int({value})"
    if isinstance(value, float):
        return f"float({value})"
    if isinstance(value, str):
        return value
    return pformat(value)
