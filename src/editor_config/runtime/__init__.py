"""
Editor Config Runtime
Loads editor config scripts into QuickJS and calls their contract functions.
"""

from .transformer import SourceTransformer, transform_es_modules
from .injection import UtilityInjector, build_utils_injection
from .sandbox import CONTRACT_FUNCTIONS, SandboxContext, build_wrapper_script
from .invoker import Invoker
from .isolation import run_isolated

__all__ = [
    "SourceTransformer",
    "transform_es_modules",
    "UtilityInjector",
    "build_utils_injection",
    "CONTRACT_FUNCTIONS",
    "SandboxContext",
    "build_wrapper_script",
    "Invoker",
    "run_isolated",
]
