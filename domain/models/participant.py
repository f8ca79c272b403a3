"""
Participant identity model.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Participant:
    """A resolved platform identity taking part in an operation."""

    user_id: str
    username: str
