"""
Client bootstrap: environment defaults + resolved flags + token helper → Client.

Order
1. start from the environment-derived Config;
2. a non-empty address flag overrides the address;
3. when any TLS flag is set, a TLSConfig with exactly the flag values
   replaces the environment's TLS settings; otherwise they are untouched;
4. build the Client (ClientCreateError on failure, never retried);
5. install the wrapping lookup: a fixed TTL when wrap_ttl is non-zero,
   default_wrapping_lookup_func otherwise;
6. token: the client's own (VAULT_TOKEN) first, then the token helper.
   An empty result leaves the client unauthenticated.
"""
import dataclasses
import datetime
import functools
import logging

import httpx

from .api import Client, TLSConfig, default_wrapping_lookup_func
from .faults import ClientCreateError, TokenHelperError
from .utils import format_duration

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class ClientOptions:
    """
    Command-line values relevant to building a client.
    """
    address: str = ""
    ca_cert: str = ""
    ca_path: str = ""
    client_cert: str = ""
    client_key: str = ""
    tls_server_name: str = ""
    tls_skip_verify: bool = False
    wrap_ttl: datetime.timedelta = datetime.timedelta()

    def wants_tls(self):
        return bool(
            self.ca_cert or self.ca_path or self.client_cert or
            self.client_key or self.tls_server_name or self.tls_skip_verify
        )


def configure(config, options, /):
    """
    Apply the command-line options on top of an environment-derived Config.
    """
    if options.address:
        config.address = options.address

    if options.wants_tls():
        logger.debug("applying TLS configuration from flags")
        config.configure_tls(TLSConfig(
            ca_cert=options.ca_cert,
            ca_path=options.ca_path,
            client_cert=options.client_cert,
            client_key=options.client_key,
            tls_server_name=options.tls_server_name,
            insecure=options.tls_skip_verify,
        ))

    return config


def wrapping_lookup(wrap_ttl, /, fallback=default_wrapping_lookup_func, environ=None):
    """
    Return the wrapping lookup function for a wrap TTL.

    A non-zero TTL wraps every request with the same TTL string; a zero TTL
    defers to ``fallback`` for each (operation, path) pair, reading
    ``environ`` instead of the process environment when one is given.
    """
    if not wrap_ttl:
        return fallback if environ is None else functools.partial(fallback, environ=environ)

    ttl = format_duration(wrap_ttl)

    def lookup(operation, path, /):
        return ttl

    return lookup


def resolve_token(client, token_helper=None, /):
    """
    Return the token to use: the client's own, else the token helper's.

    token_helper is a factory returning a TokenHelper; it is only called when
    the client has no token.
    """
    if token := client.token():
        logger.debug("using token from the environment")
        return token

    if token_helper is None:
        return ""

    try:
        helper = token_helper()
    except Exception as e:
        raise TokenHelperError("failed to get token helper") from e

    try:
        token = helper.get()
    except Exception as e:
        raise TokenHelperError("failed to retrieve from token helper") from e

    if token:
        logger.debug("using token from the token helper")
    return token


def build_client(config, options, /, token_helper=None, *, environ=None):
    config = configure(config, options)

    try:
        client = Client(config, environ=environ)
    except (OSError, ValueError, httpx.InvalidURL) as e:
        raise ClientCreateError("failed to create client") from e

    client.set_wrapping_lookup_func(wrapping_lookup(options.wrap_ttl, environ=environ))

    try:
        token = resolve_token(client, token_helper)
    except TokenHelperError:
        client.close()
        raise

    if token:
        client.set_token(token)

    return client


__all__ = (
    "ClientOptions",
    "configure",
    "wrapping_lookup",
    "resolve_token",
    "build_client",
)
