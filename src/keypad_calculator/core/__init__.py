from .handler_registry import KeyHandlerRegistry
from .editor import ExpressionEditor

__all__ = ["KeyHandlerRegistry", "ExpressionEditor"]
