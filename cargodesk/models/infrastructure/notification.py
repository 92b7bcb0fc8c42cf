"""
CargoDesk - Notification Model

Dataclass for a transient message shown once on the next rendered page.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Notification:
    """A success or error message queued for the user"""
    kind: str  # "success" | "error"
    title: str
    description: Optional[str] = None
