"""Farmstead: data-access core for the farm-operations console.

Offline-resilient read-through caching for console screens and
field-level change auditing for priced entities.
"""

__version__ = "0.1.0"
