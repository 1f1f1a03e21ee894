"""
Forward-stagewise backends.

Available backends:
    CPUStagewiseBackend: NumPy implementation
"""

from pyinfluence.stagewise.backends.cpu import CPUStagewiseBackend

__all__ = [
    "CPUStagewiseBackend",
]
