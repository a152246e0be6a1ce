"""Function decorators for runtime contracts."""

from .contract import contract, is_contracted

__all__ = ["contract", "is_contracted"]
