"""
Resolved caller identity.

Authentication happens before the core is reached; by the time a service
runs, the caller is reduced to two trusted facts: who they are and whether
they carry the manager flag.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Actor:
    """The authenticated sales person performing an operation."""

    id: int
    is_manager: bool = False
