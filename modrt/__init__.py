"""Host-side module runtime: resolve, instantiate and schedule registered modules."""

from . import constants as _constants
from . import runtime as _runtime
from . import manifest as _manifest
from .constants import *  # noqa: F401,F403
from .runtime import *  # noqa: F401,F403
from .manifest import *  # noqa: F401,F403

__all__ = []
__all__ += getattr(_constants, "__all__", [])
__all__ += getattr(_runtime, "__all__", [])
__all__ += getattr(_manifest, "__all__", [])
