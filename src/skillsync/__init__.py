"""skillsync: Sync agent skills shipped in dependency trees into agent skill directories."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
