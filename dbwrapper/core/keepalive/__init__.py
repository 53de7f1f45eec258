"""
Keep-alive connection lifecycle: one lazily opened connection per wrapper,
closed after each operation or after an idle timeout.
"""

from .lifecycle import ConnectionLifecycle
from .timer import IdleTimer

__all__ = ["ConnectionLifecycle", "IdleTimer"]
