"""Entity code allocation."""

from farmstead.ids.allocator import IdentifierAllocator, RpcIdentifierAllocator

__all__ = ["IdentifierAllocator", "RpcIdentifierAllocator"]
