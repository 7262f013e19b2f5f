__title__ = 'vaultcli'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .base import *
from .bindings import *
from .bootstrap import *
from .completion import *
from .faults import *
from .flags import *
from .token import *
from .ui import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the command layer
__all__ += base.__all__  # type: ignore[attr-defined]
# Load the exposed API of the bindings
__all__ += bindings.__all__  # type: ignore[attr-defined]
# Load the exposed API of the client bootstrap
__all__ += bootstrap.__all__  # type: ignore[attr-defined]
# Load the exposed API of the completion predictors
__all__ += completion.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the flag sets
__all__ += flags.__all__  # type: ignore[attr-defined]
# Load the exposed API of the token helpers
__all__ += token.__all__  # type: ignore[attr-defined]
# Load the exposed API of the terminal output
__all__ += ui.__all__  # type: ignore[attr-defined]
