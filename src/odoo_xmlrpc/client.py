"""
Odoo XML-RPC Client

Domain-shaped operations (read, search, create, write) on top of a lazily
created and lazily authenticated Connection.
"""
import logging
from dataclasses import dataclass
from typing import Any

from .config import DEFAULT_PORT, ClientOptions, Settings
from .criteria import Criteria
from .rpc.connection import Connection
from .rpc.exceptions import (
    ArityError,
    InvalidCriteriaError,
    LoginFailedError,
    MissingCredentialsError,
    OdooError,
    UnexpectedResultShapeError,
)

logger = logging.getLogger(__name__)


@dataclass
class Credentials:
    host: str
    port: int = DEFAULT_PORT
    database: str | None = None
    username: str | None = None
    password: str | None = None

    def is_complete(self) -> bool:
        return bool(
            self.host and self.port and self.database and self.username and self.password
        )


class OdooXmlRpc:
    """
    Client for the records of an Odoo server.

    Nothing is sent until the first operation: the connection is created
    then, and the login done transparently for operations needing a session.

    Example:
        odoo = OdooXmlRpc("https://erp.example.com", 443, "prod", "admin", "secret")
        users = odoo.search("res.users", Criteria.create().equal("login", "admin"))
        odoo.read("res.users", users, ["login", "name"])
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        database: str | None = None,
        username: str | None = None,
        password: str | None = None,
        options: ClientOptions | dict | None = None,
    ):
        self.credentials = Credentials(host, int(port), database, username, password)
        self.options = options if options is not None else ClientOptions()
        self.trace_logger: logging.Logger | None = None

        self._connection: Connection | None = None

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "OdooXmlRpc":
        """Build a client from environment settings."""
        settings = settings or Settings()
        return cls(
            host=settings.odoo_host,
            port=settings.odoo_port,
            database=settings.odoo_db,
            username=settings.odoo_username,
            password=settings.odoo_password,
            options=settings.client_options,
        )

    # =========================================================================
    # Configuration
    # =========================================================================

    def set_database(self, database: str) -> "OdooXmlRpc":
        self.credentials.database = database
        return self

    def set_username(self, username: str) -> "OdooXmlRpc":
        self.credentials.username = username
        return self

    def set_password(self, password: str) -> "OdooXmlRpc":
        self.credentials.password = password
        return self

    def set_client_options(self, options: ClientOptions | dict) -> "OdooXmlRpc":
        """Set the HTTP client options used by the next connection."""
        self.options = options
        return self

    def set_logger(self, trace_logger: logging.Logger) -> "OdooXmlRpc":
        """Set the logger receiving the trace of every XML-RPC call."""
        self.trace_logger = trace_logger
        if self._connection is not None:
            self._connection.set_logger(trace_logger)
        return self

    # =========================================================================
    # Session
    # =========================================================================

    def login(self) -> "OdooXmlRpc":
        """
        Log in now instead of on the first call.

        Raises:
            MissingCredentialsError: If host, port, database, username or password
                is not set
            LoginFailedError: If the server refused the login
        """
        self._ensure_ready(require_login=False)

        if not self.credentials.is_complete():
            raise MissingCredentialsError("Check your Odoo setting")

        connection = self.get_client()
        connection.set_client_options(self.options)
        connection.set_database(self.credentials.database)
        connection.set_username(self.credentials.username)
        connection.set_password(self.credentials.password)

        if not connection.login():
            cause = connection.get_error()
            self._connection = None
            connection.close()
            raise LoginFailedError(
                "Fail to login",
                database=self.credentials.database,
                username=self.credentials.username,
                reason=str(cause) if cause else None,
            ) from cause

        return self

    def get_uid(self) -> int | None:
        if self._connection is None:
            return None
        return self._connection.get_uid()

    def get_client(self) -> Connection:
        """Return the underlying connection (use with caution)."""
        if self._connection is None:
            raise OdooError("XML-RPC client not initialized")
        return self._connection

    def _ensure_ready(self, require_login: bool = True) -> None:
        if self._connection is not None:
            if require_login and self._connection.get_uid() is None:
                self.login()
            return

        logger.debug(f"Opening connection to {self.credentials.host}:{self.credentials.port}")
        self._connection = Connection(self.credentials.host, self.credentials.port)
        self._connection.set_client_options(self.options)
        if self.trace_logger is not None:
            self._connection.set_logger(self.trace_logger)

        if require_login:
            self.login()

    # =========================================================================
    # Operations
    # =========================================================================

    def call(self, *args: Any) -> Any:
        """
        Call a model method: ``call(model, method, *params)``.

        Raises:
            ArityError: If model and method are not both given
        """
        if len(args) < 2:
            raise ArityError(
                "call must have at least 2 parameters (model, method)",
                given=len(args),
            )

        self._ensure_ready()
        return self.get_client().call(*args)

    def get_dbs(self) -> list:
        """Return the databases available on the server, no login needed."""
        self._ensure_ready(require_login=False)
        return _expect_array(self.get_client().get_list_db())

    def read(self, model: str, ids: Any, fields: list[str] | None = None) -> list:
        """Read ``fields`` (all when empty) of one id or a list of ids."""
        result = self.call(model, "read", _normalize_ids(ids), fields or [])
        return _expect_array(result)

    def read_one(self, model: str, record_id: int, fields: list[str] | None = None) -> dict | None:
        """Read one record, None if it does not exist."""
        result = self.read(model, record_id, fields)
        if isinstance(result, (list, tuple)) and result and isinstance(result[0], (dict, list, tuple)):
            return result[0]
        return None

    def search(self, model: str, criteria: Criteria | list | tuple) -> list:
        """
        Search record ids of a model.

        Args:
            model: The model name (e.g. 'res.users')
            criteria: A Criteria or a list of [field, operator, value]

        Raises:
            InvalidCriteriaError: If criteria is neither a list nor a Criteria
        """
        if isinstance(criteria, Criteria):
            criteria = criteria.get()

        if not isinstance(criteria, (list, tuple)):
            raise InvalidCriteriaError(
                "criteria must be a list or an instance of Criteria",
                given=type(criteria).__name__,
            )

        return _expect_array(self.call(model, "search", list(criteria)))

    def create(self, model: str, values: dict | list) -> list:
        return _expect_array(self.call(model, "create", values))

    def write(self, model: str, ids: Any, values: dict) -> list:
        return _expect_array(self.call(model, "write", _normalize_ids(ids), values))

    # =========================================================================
    # Resources
    # =========================================================================

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()

    def __enter__(self) -> "OdooXmlRpc":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, str):
        try:
            float(value)
        except ValueError:
            return False
        return True
    return False


def _normalize_ids(ids: Any) -> Any:
    """Wrap a bare id in a list, anything else is passed through."""
    if _is_numeric(ids):
        return [ids]
    return ids


def _expect_array(result: Any) -> Any:
    if not isinstance(result, (list, tuple, dict)):
        raise UnexpectedResultShapeError(
            "result must be a list or a struct",
            result_type=type(result).__name__,
        )
    return result
