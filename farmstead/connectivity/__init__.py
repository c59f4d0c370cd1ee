"""Connectivity monitors."""

from farmstead.connectivity.monitor import (
    ConnectivityMonitor,
    HttpConnectivityMonitor,
    StaticConnectivityMonitor,
    build_connectivity_monitor,
)

__all__ = [
    "ConnectivityMonitor",
    "HttpConnectivityMonitor",
    "StaticConnectivityMonitor",
    "build_connectivity_monitor",
]
