r"""Backoff strategies used between retry attempts.

The transport defaults to ``ExponentialBackoff`` starting at one second
and capped at thirty seconds. ``ConstantBackoff`` and ``LinearBackoff``
are available through the ``with_backoff`` transport option.
"""

from __future__ import annotations

__all__ = [
    "BaseBackoffStrategy",
    "ConstantBackoff",
    "ExponentialBackoff",
    "LinearBackoff",
]

from steadyreq.backoff.base import BaseBackoffStrategy
from steadyreq.backoff.constant import ConstantBackoff
from steadyreq.backoff.exponential import ExponentialBackoff
from steadyreq.backoff.linear import LinearBackoff
