"""
modrt runtime: resolution, instantiation and scheduling of registered modules.

| Layer                   | Purpose                                          |
<------------------------ + ------------------------------------------------->
| **Path algebra**        | join / normalize slash-delimited paths           |
| **Registry**            | definitions, mains, remaps, builtins, installed  |
| **Resolver**            | specifier → canonical path                       |
| **Instantiator**        | one instance per path, circular-safe             |
| **Global bindings**     | global-bound modules load once                   |
| **Scheduler**           | `run` entries wait for pending jobs              |
| **Analysis**            | NetworkX import graph, Graphviz export           |
"""

from . import paths as _paths
from . import core as _core
from . import registry as _registry
from . import resolver as _resolver
from . import instantiator as _instantiator
from . import bindings as _bindings
from . import scheduler as _scheduler
from . import context as _context
from . import analysis as _analysis
from .cli import main, parse_args

from .paths import *
from .core import *
from .registry import *
from .resolver import *
from .instantiator import *
from .bindings import *
from .scheduler import *
from .context import *
from .analysis import *

__all__ = []
for module in (_paths, _core, _registry, _resolver, _instantiator, _bindings, _scheduler, _context, _analysis):
    __all__.extend(getattr(module, '__all__', []))
__all__ += ['main', 'parse_args']
__all__ = list(dict.fromkeys(__all__))
