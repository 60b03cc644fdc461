"""
RK-RK backends.

Available backends:
    CPURKRKBackend: Thread-pool implementation on NumPy arrays
"""

from pykaczmarz.rkrk.backends.cpu import CPURKRKBackend

__all__ = [
    "CPURKRKBackend",
]
