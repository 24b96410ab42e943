"""
Pytest Fixtures for Odoo XML-RPC Client Tests

Provides an in-memory fake Odoo server served through httpx.MockTransport,
speaking real XML-RPC payloads, plus clients wired to it.
"""

import os
import xmlrpc.client

import httpx
import pytest

from odoo_xmlrpc import ClientOptions, Connection, OdooXmlRpc

# Live server configuration from environment
TEST_CONFIG = {
    "host": os.getenv("TEST_ODOO_HOST"),
    "port": int(os.getenv("TEST_ODOO_PORT", "8069")),
    "database": os.getenv("TEST_ODOO_DB"),
    "username": os.getenv("TEST_ODOO_USERNAME"),
    "password": os.getenv("TEST_ODOO_PASSWORD"),
    "uid": int(os.getenv("TEST_ODOO_UID", "2")),
}

FAKE_HOST = "odoo.test"
FAKE_DB = "testdb"


class FakeOdoo:
    """
    Minimal Odoo answering db.list, common.login, object.execute and the
    report service over XML-RPC.

    create and write answer with a list of ids.
    """

    OPERATORS = {
        "=": lambda a, b: a == b,
        "!=": lambda a, b: a != b,
        "<": lambda a, b: a < b,
        "<=": lambda a, b: a <= b,
        ">": lambda a, b: a > b,
        ">=": lambda a, b: a >= b,
        "like": lambda a, b: str(b) in str(a),
        "ilike": lambda a, b: str(b).lower() in str(a).lower(),
    }

    def __init__(self):
        self.databases = [FAKE_DB]
        self.users = {"admin": ("admin", 2)}  # login -> (password, uid)
        self.tables = {
            "res.users": {
                2: {"id": 2, "login": "admin", "name": "Administrator", "active": True},
                6: {"id": 6, "login": "demo", "name": "Marc Demo", "active": True},
            },
            "res.partner": {},
        }
        self.login_result = None  # forces the uid answered by common.login
        self.next_id = 100
        self.requests: list[tuple[str, str, tuple]] = []

    # =========================================================================
    # Transport
    # =========================================================================

    def handler(self, request: httpx.Request) -> httpx.Response:
        params, method = xmlrpc.client.loads(request.content)
        path = request.url.path
        self.requests.append((path, method, params))

        service = {
            "/xmlrpc/db": self.db,
            "/xmlrpc/common": self.common,
            "/xmlrpc/object": self.object,
            "/xmlrpc/report": self.report,
        }.get(path)
        if service is None:
            return httpx.Response(404, text="Not Found")

        try:
            body = xmlrpc.client.dumps((service(method, *params),), methodresponse=True, allow_none=True)
        except xmlrpc.client.Fault as fault:
            body = xmlrpc.client.dumps(fault, methodresponse=True)

        return httpx.Response(200, content=body.encode(), headers={"Content-Type": "text/xml"})

    def calls_to(self, path: str) -> list[tuple[str, tuple]]:
        return [(method, params) for p, method, params in self.requests if p == path]

    # =========================================================================
    # Services
    # =========================================================================

    def db(self, method, *params):
        if method != "list":
            raise xmlrpc.client.Fault(1, f"Method {method} not found")
        return list(self.databases)

    def common(self, method, database, login, password):
        if method != "login":
            raise xmlrpc.client.Fault(1, f"Method {method} not found")
        if self.login_result is not None:
            return self.login_result
        stored_password, uid = self.users.get(login, (None, 0))
        if database in self.databases and stored_password == password:
            return uid
        return 0

    def object(self, method, database, uid, password, model, model_method, *args):
        if method != "execute":
            raise xmlrpc.client.Fault(1, f"Method {method} not found")
        self._check_access(database, uid, password)

        if model not in self.tables:
            raise xmlrpc.client.Fault(1, f"Object {model} doesn't exist")
        table = self.tables[model]

        if model_method == "search":
            return [rid for rid, row in sorted(table.items()) if self._match(row, args[0])]
        if model_method == "read":
            ids, fields = args[0], (args[1] if len(args) > 1 else [])
            return [self._project(table[rid], fields) for rid in ids if rid in table]
        if model_method == "create":
            vals_list = args[0] if isinstance(args[0], list) else [args[0]]
            return [self._insert(table, vals) for vals in vals_list]
        if model_method == "write":
            ids, values = args
            missing = [rid for rid in ids if rid not in table]
            if missing:
                raise xmlrpc.client.Fault(2, f"MissingError: Record does not exist or has been deleted. {missing}")
            for rid in ids:
                table[rid].update(values)
            return list(ids)

        raise xmlrpc.client.Fault(1, f"UserError: Method {model_method} is not supported")

    def report(self, method, database, uid, password, *args):
        self._check_access(database, uid, password)
        if method == "report":
            return 42
        if method == "report_get":
            return {"state": True, "result": "JVBERi0xLjQK", "format": "pdf"}
        raise xmlrpc.client.Fault(1, f"Method {method} not found")

    # =========================================================================
    # Helpers
    # =========================================================================

    def _check_access(self, database, uid, password):
        valid = {(u, p) for p, u in self.users.values()}
        if database not in self.databases or (uid, password) not in valid:
            raise xmlrpc.client.Fault(3, "Access Denied")

    def _match(self, row, domain):
        for field, operator, value in domain:
            if not self.OPERATORS[operator](row.get(field), value):
                return False
        return True

    @staticmethod
    def _project(row, fields):
        if not fields:
            return dict(row)
        return {"id": row["id"], **{f: row.get(f, False) for f in fields}}

    def _insert(self, table, values):
        rid = self.next_id
        self.next_id += 1
        table[rid] = {"id": rid, **values}
        return rid


@pytest.fixture
def test_config() -> dict:
    """Return live server configuration."""
    return TEST_CONFIG


@pytest.fixture
def fake_odoo() -> FakeOdoo:
    return FakeOdoo()


@pytest.fixture
def client_options(fake_odoo) -> ClientOptions:
    """HTTP options routing every request to the fake server."""
    return ClientOptions(transport=httpx.MockTransport(fake_odoo.handler))


@pytest.fixture
def connection(client_options):
    """Unauthenticated connection to the fake server."""
    with Connection(FAKE_HOST).set_client_options(client_options) as conn:
        yield conn


@pytest.fixture
def odoo(client_options):
    """Client facade with valid credentials for the fake server."""
    with OdooXmlRpc(FAKE_HOST, 8069, FAKE_DB, "admin", "admin", options=client_options) as client:
        yield client
