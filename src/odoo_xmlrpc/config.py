"""Configuration management for the Odoo XML-RPC client."""

import httpx
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

DEFAULT_PORT = 8069


class ClientOptions(BaseModel):
    """Options used to build the HTTP client shared by the XML-RPC channels."""

    model_config = {"arbitrary_types_allowed": True}

    timeout: float | None = Field(30.0, description="Request timeout in seconds (None disables it)")
    verify_ssl: bool = Field(True, description="Verify TLS certificates")
    headers: dict[str, str] = Field(default_factory=dict, description="Extra HTTP headers")
    proxy: str | None = Field(None, description="HTTP proxy URL")

    # XML-RPC marshalling
    allow_none: bool = Field(True, description="Marshal None as <nil/>")
    use_builtin_types: bool = Field(False, description="Decode dates/binary to datetime/bytes")

    # Custom httpx transport (tests, mounts, retries at the socket level)
    transport: httpx.BaseTransport | None = None

    def http_client_kwargs(self) -> dict:
        """Keyword arguments for ``httpx.Client``."""
        kwargs = {
            "timeout": self.timeout,
            "verify": self.verify_ssl,
            "headers": {"Content-Type": "text/xml", **self.headers},
        }
        if self.proxy:
            kwargs["proxy"] = self.proxy
        if self.transport is not None:
            kwargs["transport"] = self.transport
        return kwargs


class Settings(BaseSettings):
    """Connection settings loaded from environment variables."""

    # Odoo connection
    odoo_host: str = "localhost"
    odoo_port: int = DEFAULT_PORT
    odoo_db: str | None = None
    odoo_username: str | None = None
    odoo_password: str | None = None

    # HTTP
    odoo_timeout: float | None = 30.0
    odoo_verify_ssl: bool = True

    # Development
    debug: bool = False

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
    }

    @property
    def client_options(self) -> ClientOptions:
        """Return HTTP client options derived from the settings."""
        return ClientOptions(timeout=self.odoo_timeout, verify_ssl=self.odoo_verify_ssl)
