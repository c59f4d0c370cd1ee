"""Remote query/mutation service clients."""

from farmstead.remote.inmemory import AuditTrigger, InMemoryRemoteService
from farmstead.remote.loaders import remote_loader
from farmstead.remote.models import RemoteError, RemoteResponse
from farmstead.remote.postgrest import PostgrestRemoteService
from farmstead.remote.service import RemoteService

__all__ = [
    "AuditTrigger",
    "InMemoryRemoteService",
    "PostgrestRemoteService",
    "RemoteError",
    "RemoteResponse",
    "RemoteService",
    "remote_loader",
]
