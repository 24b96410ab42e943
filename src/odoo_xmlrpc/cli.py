"""
Odoo XML-RPC command line

Usage:
    odoo-xmlrpc dbs
    odoo-xmlrpc login
    odoo-xmlrpc read res.users 2 --fields login name
    odoo-xmlrpc search res.users --domain '[["login", "=", "admin"]]'

Connection values come from ODOO_HOST, ODOO_PORT, ODOO_DB, ODOO_USERNAME and
ODOO_PASSWORD unless given as options.
"""
import argparse
import json
import logging
import sys

from .client import OdooXmlRpc
from .config import Settings
from .rpc.exceptions import OdooError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="odoo-xmlrpc", description="Query an Odoo server over XML-RPC")
    parser.add_argument("--host", help="Odoo host, with or without scheme")
    parser.add_argument("--port", type=int, help="Odoo XML-RPC port")
    parser.add_argument("--db", help="Database name")
    parser.add_argument("--username", help="Login")
    parser.add_argument("--password", help="Password")
    parser.add_argument("--debug", action="store_true", help="Log every XML-RPC call")

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("dbs", help="List the databases")
    commands.add_parser("login", help="Log in and print the uid")

    read = commands.add_parser("read", help="Read records by id")
    read.add_argument("model")
    read.add_argument("ids", nargs="+", type=int)
    read.add_argument("--fields", nargs="*", default=[])

    search = commands.add_parser("search", help="Search record ids")
    search.add_argument("model")
    search.add_argument("--domain", type=json.loads, default=[], help="JSON list of [field, operator, value]")

    return parser


def build_client(args: argparse.Namespace, settings: Settings) -> OdooXmlRpc:
    client = OdooXmlRpc.from_settings(settings)
    if args.host:
        client.credentials.host = args.host
    if args.port:
        client.credentials.port = args.port
    if args.db:
        client.set_database(args.db)
    if args.username:
        client.set_username(args.username)
    if args.password:
        client.set_password(args.password)
    return client


def run(args: argparse.Namespace, client: OdooXmlRpc):
    if args.command == "dbs":
        return client.get_dbs()
    if args.command == "login":
        return client.login().get_uid()
    if args.command == "read":
        return client.read(args.model, args.ids, args.fields)
    if args.command == "search":
        return client.search(args.model, args.domain)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    settings = Settings()
    debug = args.debug or settings.debug

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    with build_client(args, settings) as client:
        if debug:
            client.set_logger(logging.getLogger("odoo_xmlrpc.trace"))
        logger.debug(f"Running {args.command} against {client.credentials.host}:{client.credentials.port}")
        try:
            result = run(args, client)
        except OdooError as e:
            print(str(e), file=sys.stderr)
            return 1

    print(json.dumps(result, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
