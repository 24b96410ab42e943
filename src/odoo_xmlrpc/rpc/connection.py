"""
Odoo XML-RPC Connection

Owns one authenticated session against one Odoo endpoint and is the single
point of wire interaction for the client facade.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx

from ..config import DEFAULT_PORT, ClientOptions
from .endpoint import XmlRpcEndpoint
from .exceptions import (
    InvalidCredentialsError,
    MissingCredentialsError,
    NotAuthenticatedError,
    OdooError,
    UnknownChannelError,
    map_transport_error,
)
from .formatter import RequestLogFormatter

logger = logging.getLogger(__name__)


class Channel(str, Enum):
    """The fixed XML-RPC services exposed by an Odoo server."""

    DB = "db"
    COMMON = "common"
    OBJECT = "object"
    REPORT = "report"

    @property
    def path(self) -> str:
        return f"/xmlrpc/{self.value}"

    @classmethod
    def resolve(cls, channel: "str | Channel") -> "Channel":
        try:
            return cls(channel)
        except ValueError:
            raise UnknownChannelError(f"{channel} doesn't exist", channel=str(channel)) from None


@dataclass(frozen=True)
class Session:
    """Authenticated triple re-sent with every object/report call."""

    database: str
    uid: int
    password: str

    def as_params(self) -> tuple:
        return (self.database, self.uid, self.password)


class Connection:
    """
    Connection to the XML-RPC services of one Odoo server.

    Not thread-safe: login and call both mutate the session without a lock,
    use one Connection per thread or logical session.

    Error Handling: login() reports failures through its return value and
    get_error(); every other call raises typed OdooError subclasses.
    """

    def __init__(self, url: str | None = None, port: int = DEFAULT_PORT):
        self.base_url = url
        self.port = port

        self.username: str | None = None
        self.password: str | None = None
        self.database: str | None = None

        self.options = ClientOptions()
        self.trace_logger: logging.Logger | None = None

        self._session: Session | None = None
        self._error: OdooError | None = None
        self._http: httpx.Client | None = None
        self._endpoints: dict[Channel, XmlRpcEndpoint] = {}

    # =========================================================================
    # Configuration
    # =========================================================================

    def set_url(self, url: str) -> "Connection":
        self.base_url = url
        self.close()
        return self

    def set_port(self, port: int) -> "Connection":
        self.port = int(port)
        self.close()
        return self

    def set_username(self, username: str) -> "Connection":
        self.username = username
        return self

    def set_password(self, password: str) -> "Connection":
        self.password = password
        return self

    def set_database(self, database: str) -> "Connection":
        self.database = database
        return self

    def set_client_options(self, options: ClientOptions | dict) -> "Connection":
        """Set the HTTP/XML-RPC options, as a ClientOptions or a plain dict."""
        if not isinstance(options, ClientOptions):
            options = ClientOptions.model_validate(options)
        self.options = options
        self.close()
        return self

    def set_logger(self, trace_logger: logging.Logger | None) -> "Connection":
        """Attach the logger receiving the request/response trace of each call."""
        self.trace_logger = trace_logger
        return self

    # =========================================================================
    # Session
    # =========================================================================

    def login(self) -> bool:
        """
        Log in with the configured database, username and password.

        Returns:
            True if logged in, False otherwise (see get_error())

        Raises:
            MissingCredentialsError: If username, password or database is not set
        """
        if not self.username or not self.password or not self.database:
            raise MissingCredentialsError(
                "You must set login, password and database before to log in"
            )

        try:
            uid = self._internal_call(
                Channel.COMMON, "login", (self.database, self.username, self.password)
            )
            if not uid:
                raise InvalidCredentialsError("Invalid login", username=self.username)
        except OdooError as e:
            self._session = None
            self._error = e
            logger.warning(f"Login failed on {self.database} for {self.username}: {e}")
            return False
        except Exception as e:
            error = map_transport_error(e)
            error.__cause__ = e
            self._session = None
            self._error = error
            logger.warning(f"Login failed on {self.database} for {self.username}: {error}")
            return False

        self._session = Session(self.database, uid, self.password)
        logger.info(f"Logged in to {self.database} as {self.username} (uid {uid})")
        return True

    def logout(self) -> None:
        """Forget the session, the next object call needs a new login()."""
        self._session = None

    def get_uid(self) -> int | None:
        return self._session.uid if self._session else None

    def get_error(self) -> OdooError | None:
        """Return the most recent recorded error."""
        return self._error

    # =========================================================================
    # Calls
    # =========================================================================

    def get_list_db(self) -> Any:
        """List the databases available on the server."""
        return self._internal_call(Channel.DB, "list", ())

    def call(self, *args: Any) -> Any:
        """Call ``object.execute(database, uid, password, *args)``."""
        return self._internal_call(Channel.OBJECT, "execute", self._authenticated(args))

    def report(self, *args: Any) -> Any:
        """Prepare a report, ``report.report(database, uid, password, *args)``."""
        return self._internal_call(Channel.REPORT, "report", self._authenticated(args))

    def get_report(self, *args: Any) -> Any:
        """Fetch a report, ``report.report_get(database, uid, password, *args)``."""
        return self._internal_call(Channel.REPORT, "report_get", self._authenticated(args))

    def _authenticated(self, args: tuple) -> tuple:
        if self._session is None:
            raise NotAuthenticatedError("Impossible to call method if not logged")
        return self._session.as_params() + tuple(args)

    def _internal_call(self, channel: Channel, method: str, params: tuple) -> Any:
        endpoint = self.get_endpoint(channel)
        formatter = RequestLogFormatter(endpoint)

        try:
            result = endpoint.call(method, params)
        except OdooError as e:
            self._error = e
            if self.trace_logger is not None:
                self.trace_logger.debug(formatter.format_request(channel.value))
                self.trace_logger.error(formatter.format_fault(e))
            raise

        if self.trace_logger is not None:
            self.trace_logger.debug(formatter.format_request(channel.value))
            self.trace_logger.debug(formatter.format_response())

        return result

    # =========================================================================
    # Endpoints
    # =========================================================================

    def get_endpoint(self, channel: "str | Channel") -> XmlRpcEndpoint:
        """Return the endpoint of a channel, created on first use."""
        channel = Channel.resolve(channel)
        if channel not in self._endpoints:
            url = self.build_url(channel)
            logger.debug(f"Creating XML-RPC endpoint {url}")
            self._endpoints[channel] = XmlRpcEndpoint(
                url,
                self._get_http_client(),
                allow_none=self.options.allow_none,
                use_builtin_types=self.options.use_builtin_types,
            )
        return self._endpoints[channel]

    def build_url(self, channel: "str | Channel") -> str:
        """
        Build the URL of a channel.

        http:// is assumed when the host has no scheme; the port is left out
        for https on 443 and http on 80.
        """
        channel = Channel.resolve(channel)

        url = (self.base_url or "").rstrip("/")
        if not url.startswith(("http://", "https://")):
            url = "http://" + url

        if (url.startswith("https://") and self.port == 443) or (
            url.startswith("http://") and self.port == 80
        ):
            port = ""
        else:
            port = f":{self.port}"

        return url + port + channel.path

    def _get_http_client(self) -> httpx.Client:
        if self._http is None:
            self._http = httpx.Client(**self.options.http_client_kwargs())
        return self._http

    def close(self) -> None:
        """Release the HTTP client, endpoints are rebuilt on next use."""
        self._endpoints.clear()
        if self._http is not None:
            self._http.close()
            self._http = None

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
