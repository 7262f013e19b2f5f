"""
HTTP client for the secrets server, built on httpx.

Requests carry the client token in X-Vault-Token and, when the wrapping
lookup function returns a TTL for the (operation, path) pair, ask the server
to wrap the response with X-Vault-Wrap-TTL.
"""
import functools
import logging
import os
import ssl

import httpx

from ..faults import RequestError
from .config import DEFAULT_WRAPPING_TTL, ENV_VAULT_TOKEN, ENV_VAULT_WRAP_TTL, default_config

logger = logging.getLogger(__name__)

TOKEN_HEADER = "X-Vault-Token"
WRAP_TTL_HEADER = "X-Vault-Wrap-TTL"


def default_wrapping_lookup_func(operation, path, /, environ=None):
    """
    Wrapping policy used when the caller did not ask for a fixed TTL.

    VAULT_WRAP_TTL wins; otherwise only explicit wrap requests
    (PUT/POST sys/wrapping/wrap) are wrapped, with DEFAULT_WRAPPING_TTL.
    """
    environ = os.environ if environ is None else environ
    if ttl := environ.get(ENV_VAULT_WRAP_TTL, ""):
        return ttl
    if operation in ("PUT", "POST") and path == "sys/wrapping/wrap":
        return DEFAULT_WRAPPING_TTL
    return ""


def _ssl_context(tls, /):
    if tls is None:
        return True

    if tls.insecure:
        context = ssl.create_default_context()
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    elif tls.ca_cert:
        context = ssl.create_default_context(cafile=tls.ca_cert)
    elif tls.ca_path:
        context = ssl.create_default_context(capath=tls.ca_path)
    else:
        context = ssl.create_default_context()

    if tls.client_cert or tls.client_key:
        if not (tls.client_cert and tls.client_key):
            raise ValueError("both client cert and client key must be provided")
        context.load_cert_chain(tls.client_cert, tls.client_key)

    return context


class Client:
    """
    A configured connection to the server.

    Raises ValueError (bad address, incomplete client certificate) or OSError
    (unreadable TLS material) from the constructor.
    """

    def __init__(self, config=None, /, environ=None):
        self.config = config = config or default_config()
        environ = os.environ if environ is None else environ

        address = httpx.URL(config.address)
        if address.scheme not in ("http", "https") or not address.host:
            raise ValueError("invalid server address %r" % config.address)

        verify = _ssl_context(config.tls)
        transport = config.transport or httpx.HTTPTransport(verify=verify, retries=config.max_retries)
        self._http = httpx.Client(
            base_url=address,
            verify=verify,
            timeout=config.timeout,
            trust_env=config.trust_env,
            transport=transport,
        )
        self._sni_hostname = config.tls.tls_server_name if config.tls else ""
        self._environ = environ
        self._token = environ.get(ENV_VAULT_TOKEN, "")
        self._wrapping_lookup_func = None

    @property
    def address(self):
        return str(self._http.base_url).rstrip("/")

    def token(self):
        return self._token

    def set_token(self, token, /):
        self._token = token

    def clear_token(self):
        self._token = ""

    def wrapping_lookup_func(self):
        return self._wrapping_lookup_func

    def set_wrapping_lookup_func(self, fn, /):
        self._wrapping_lookup_func = fn

    def request(self, method, path, /, json=None, params=None):
        """
        Send a request to /v1/<path> and return the httpx response.
        """
        path = path.strip("/")
        lookup = self._wrapping_lookup_func or functools.partial(default_wrapping_lookup_func, environ=self._environ)

        headers = {}
        if self._token:
            headers[TOKEN_HEADER] = self._token
        if ttl := lookup(method, path):
            headers[WRAP_TTL_HEADER] = ttl

        extensions = {}
        if self._sni_hostname:
            extensions["sni_hostname"] = self._sni_hostname

        logger.debug("%s /v1/%s", method, path)
        try:
            return self._http.request(
                method,
                "/v1/" + path,
                json=json,
                params=params,
                headers=headers,
                extensions=extensions,
            )
        except httpx.HTTPError as e:
            raise RequestError("error making %s request to %s" % (method, path)) from e

    def read(self, path, /):
        """
        Read a secret; None when nothing exists at path or the server answers
        without a body.
        """
        response = self.request("GET", path)
        if response.status_code == 404:
            return None
        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            errors = (body.get("errors") or []) if isinstance(body, dict) else []
            if isinstance(errors, str):
                errors = [errors]
            raise RequestError(
                "error reading %s: code %d" % (path, response.status_code),
                status=response.status_code,
                hint="; ".join(map(str, errors)),
            )
        if not response.content.strip():
            return None
        try:
            body = response.json()
        except ValueError as e:
            raise RequestError("error parsing response from %s" % path) from e
        if not isinstance(body, dict):
            raise RequestError("unexpected response from %s: expected a JSON object" % path)
        return body

    def close(self):
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


__all__ = (
    "Client",
    "default_wrapping_lookup_func",
    "TOKEN_HEADER",
    "WRAP_TTL_HEADER",
)
