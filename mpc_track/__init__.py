__version__ = "0.1.0"
__license__ = "Apache-2.0"


# Lazy-load optional subpackages to keep CLI start-up light.
import importlib
from typing import Any

__all__ = [
    "config",
    "errors",
    "geometry",
    "planning",
    "plotting",
    "workflows",
]

_SUBMODULES = {
    "config": "mpc_track.config",
    "plotting": "mpc_track.plotting",
    "workflows": "mpc_track.workflows",
}


def __getattr__(name: str) -> Any:
    if name in _SUBMODULES:
        module = importlib.import_module(_SUBMODULES[name])
        globals()[name] = module
        return module
    raise AttributeError(f"module {__name__} has no attribute {name!r}")


# Explicitly import key modules
from . import errors
from . import geometry
from . import planning
