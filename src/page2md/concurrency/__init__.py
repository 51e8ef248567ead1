"""Thread pool for CPU-bound work."""

from .pool import WorkerPool

__all__ = ["WorkerPool"]
