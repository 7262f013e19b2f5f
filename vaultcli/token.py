"""
Token helpers: where the command line keeps the caller's token between runs.

A token helper exposes get(), store(token), erase() and path(). The client
bootstrap only ever calls get(); login-style commands store and erase.

Helpers
- InternalTokenHelper: a 0600 file, "~/.vault-token" by default.
- ExternalTokenHelper: an executable invoked as "<path> get|store|erase",
  the token travelling on stdout (get) or stdin (store).
- MemoryTokenHelper: process-local storage, for tests and embedding.
"""
import logging
import os
import subprocess
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_FILE = "~/.vault-token"


class TokenHelper(Protocol):
    def path(self) -> str: ...
    def get(self) -> str: ...
    def store(self, token: str) -> None: ...
    def erase(self) -> None: ...


class InternalTokenHelper:
    def __init__(self, path=DEFAULT_TOKEN_FILE, /):
        self._path = os.path.expanduser(path)

    def path(self):
        return self._path

    def get(self):
        try:
            with open(self._path, encoding="utf-8") as file:
                return file.read().strip()
        except FileNotFoundError:
            return ""

    def store(self, token, /):
        descriptor = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(descriptor, "w", encoding="utf-8") as file:
            file.write(token)

    def erase(self):
        try:
            os.remove(self._path)
        except FileNotFoundError:
            pass


class ExternalTokenHelper:
    """
    Delegate token storage to an external program.

    The program path must be absolute. It receives the operation as its only
    argument; a non-zero exit status is an error carrying its stderr.
    """

    def __init__(self, binary_path, /, environ=None):
        if not os.path.isabs(binary_path):
            raise ValueError("token helper path must be absolute: %r" % binary_path)
        self._path = binary_path
        self._environ = environ

    def path(self):
        return self._path

    def _run(self, operation, input=None):
        logger.debug("running token helper %s %s", self._path, operation)
        result = subprocess.run(
            [self._path, operation],
            input=input,
            capture_output=True,
            text=True,
            env=self._environ,
        )
        if result.returncode != 0:
            raise RuntimeError("token helper %r failed: %s" % (operation, result.stderr.strip()))
        return result.stdout

    def get(self):
        return self._run("get").strip()

    def store(self, token, /):
        self._run("store", token)

    def erase(self):
        self._run("erase")


class MemoryTokenHelper:
    def __init__(self, token="", /):
        self._token = token

    def path(self):
        return ""

    def get(self):
        return self._token

    def store(self, token, /):
        self._token = token

    def erase(self):
        self._token = ""


def default_token_helper():
    return InternalTokenHelper()


__all__ = (
    "TokenHelper",
    "InternalTokenHelper",
    "ExternalTokenHelper",
    "MemoryTokenHelper",
    "default_token_helper",
)
