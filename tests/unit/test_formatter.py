"""
Unit tests for the trace log formatter.

Run with: pytest tests/unit/test_formatter.py -v -m unit
"""

from unittest.mock import MagicMock
from xmlrpc.client import Fault

import pytest

from odoo_xmlrpc.rpc.endpoint import LastRequest, XmlRpcEndpoint
from odoo_xmlrpc.rpc.exceptions import OdooValidationError
from odoo_xmlrpc.rpc.formatter import RequestLogFormatter, render_value

pytestmark = [pytest.mark.unit]


@pytest.fixture
def endpoint():
    """Endpoint whose last request/response are set by each test."""
    return XmlRpcEndpoint("http://odoo.test:8069/xmlrpc/object", MagicMock())


class TestFormatRequest:
    """Tests for request rendering per channel."""

    def test_common_masks_password(self, endpoint):
        endpoint.last_request = LastRequest("login", ("testdb", "admin", "secret"))

        text = RequestLogFormatter(endpoint).format_request("common")

        assert text == "Call: :login\nArg 1 : testdb\nArg 2 : admin\nArg 3 : *****\n"
        assert "secret" not in text

    def test_object_extracts_login_information(self, endpoint):
        endpoint.last_request = LastRequest(
            "execute",
            ("testdb", 2, "secret", "res.users", "read", [5], ["login"]),
        )

        text = RequestLogFormatter(endpoint).format_request("object")

        assert text.splitlines() == [
            "Call: res.users:read with database: testdb , uid: 2 , pass: *****",
            "Arg 1 : [5]",
            "Arg 2 : ['login']",
        ]
        assert "secret" not in text

    def test_db_is_normalized_to_list(self, endpoint):
        endpoint.last_request = LastRequest("list", ())

        assert RequestLogFormatter(endpoint).format_request("db") == "Call: db:list\n"

    def test_other_channels_have_nothing_to_log(self, endpoint):
        endpoint.last_request = LastRequest("report", ("testdb", 2, "secret", "sale.order"))

        assert RequestLogFormatter(endpoint).format_request("report") == "Nothing..."


class TestFormatResponse:
    def test_response(self, endpoint):
        endpoint.last_response = [2, 6]

        assert RequestLogFormatter(endpoint).format_response() == "Response :\n[2, 6]"

    def test_fault_from_typed_error(self, endpoint):
        error = OdooValidationError("Date must be in the future")

        text = RequestLogFormatter(endpoint).format_fault(error)

        assert text == "Response with Fault :\nDate must be in the future"

    def test_fault_from_raw_xmlrpc_fault(self, endpoint):
        text = RequestLogFormatter(endpoint).format_fault(Fault(1, "Something broke"))

        assert text.endswith("Something broke")


class TestRenderValue:
    """Scalars get an explicit type tag, strings are verbatim."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (True, "bool(true)"),
            (False, "bool(false)"),
            (5, "int(5)"),
            (1.5, "float(1.5)"),
            ("admin", "admin"),
            (None, "None"),
            ({"login": "admin"}, "{'login': 'admin'}"),
        ],
    )
    def test_render(self, value, expected):
        assert render_value(value) == expected
