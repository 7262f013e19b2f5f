"""
Client configuration and environment reading.

Config carries everything needed to build a Client: the server address, an
optional TLS configuration, timeouts, retries and the httpx transport.
Config.read_environment() applies the VAULT_* variables on top of the
defaults; it is the configuration layer of the command line.
"""
import dataclasses
import logging
import os

from ..utils import parse_bool, parse_duration

logger = logging.getLogger(__name__)

DEFAULT_ADDRESS = "https://127.0.0.1:8200"
DEFAULT_WRAPPING_TTL = "5m"
DEFAULT_TIMEOUT = 60.0
DEFAULT_MAX_RETRIES = 2

ENV_VAULT_ADDRESS = "VAULT_ADDR"
ENV_VAULT_CACERT = "VAULT_CACERT"
ENV_VAULT_CAPATH = "VAULT_CAPATH"
ENV_VAULT_CLIENT_CERT = "VAULT_CLIENT_CERT"
ENV_VAULT_CLIENT_KEY = "VAULT_CLIENT_KEY"
ENV_VAULT_CLIENT_TIMEOUT = "VAULT_CLIENT_TIMEOUT"
ENV_VAULT_INSECURE = "VAULT_SKIP_VERIFY"
ENV_VAULT_TLS_SERVER_NAME = "VAULT_TLS_SERVER_NAME"
ENV_VAULT_WRAP_TTL = "VAULT_WRAP_TTL"
ENV_VAULT_MAX_RETRIES = "VAULT_MAX_RETRIES"
ENV_VAULT_TOKEN = "VAULT_TOKEN"
ENV_VAULT_FORMAT = "VAULT_FORMAT"


@dataclasses.dataclass
class TLSConfig:
    """
    TLS material for talking to the server.

    ca_cert takes precedence over ca_path; client_cert and client_key must be
    given together.
    """
    ca_cert: str = ""
    ca_path: str = ""
    client_cert: str = ""
    client_key: str = ""
    tls_server_name: str = ""
    insecure: bool = False


@dataclasses.dataclass
class Config:
    address: str = DEFAULT_ADDRESS
    tls: TLSConfig | None = None
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    # honour HTTP(S)_PROXY / NO_PROXY
    trust_env: bool = True
    transport: object = None

    def configure_tls(self, tls, /):
        if not isinstance(tls, TLSConfig):
            raise TypeError("configure_tls() argument must be a TLSConfig")
        self.tls = tls

    def read_environment(self, environ=None, /):
        """
        Apply the VAULT_* environment variables to this configuration.

        Raises ValueError when a variable holds text that cannot be parsed.
        """
        environ = os.environ if environ is None else environ

        if address := environ.get(ENV_VAULT_ADDRESS, ""):
            self.address = address

        if text := environ.get(ENV_VAULT_MAX_RETRIES, ""):
            try:
                self.max_retries = int(text, 10)
            except ValueError:
                raise ValueError("could not parse %s: %r" % (ENV_VAULT_MAX_RETRIES, text)) from None

        if text := environ.get(ENV_VAULT_CLIENT_TIMEOUT, ""):
            try:
                self.timeout = parse_duration(text).total_seconds()
            except ValueError:
                raise ValueError("could not parse %s: %r" % (ENV_VAULT_CLIENT_TIMEOUT, text)) from None

        insecure = False
        found_insecure = False
        if text := environ.get(ENV_VAULT_INSECURE, ""):
            try:
                insecure = parse_bool(text)
            except ValueError:
                raise ValueError("could not parse %s: %r" % (ENV_VAULT_INSECURE, text)) from None
            found_insecure = True

        tls = TLSConfig(
            ca_cert=environ.get(ENV_VAULT_CACERT, ""),
            ca_path=environ.get(ENV_VAULT_CAPATH, ""),
            client_cert=environ.get(ENV_VAULT_CLIENT_CERT, ""),
            client_key=environ.get(ENV_VAULT_CLIENT_KEY, ""),
            tls_server_name=environ.get(ENV_VAULT_TLS_SERVER_NAME, ""),
            insecure=insecure,
        )
        if found_insecure or tls != TLSConfig():
            logger.debug("TLS configuration read from the environment")
            self.configure_tls(tls)

        return self


def default_config():
    return Config()


__all__ = (
    "Config",
    "TLSConfig",
    "default_config",
    "DEFAULT_ADDRESS",
    "DEFAULT_WRAPPING_TTL",
    "ENV_VAULT_ADDRESS",
    "ENV_VAULT_CACERT",
    "ENV_VAULT_CAPATH",
    "ENV_VAULT_CLIENT_CERT",
    "ENV_VAULT_CLIENT_KEY",
    "ENV_VAULT_CLIENT_TIMEOUT",
    "ENV_VAULT_INSECURE",
    "ENV_VAULT_TLS_SERVER_NAME",
    "ENV_VAULT_WRAP_TTL",
    "ENV_VAULT_MAX_RETRIES",
    "ENV_VAULT_TOKEN",
    "ENV_VAULT_FORMAT",
)
