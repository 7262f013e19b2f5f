"""
Minimal client for the secrets server: configuration, TLS and requests.
"""
from .client import *
from .config import *

__all__ = ()
__all__ += client.__all__  # type: ignore[name-defined]
__all__ += config.__all__  # type: ignore[name-defined]
