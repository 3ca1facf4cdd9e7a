"""skillsync exception hierarchy.

All public exceptions inherit from SkillSyncError, giving callers a single
base class to catch when they want to handle any skillsync-specific failure
without swallowing unrelated errors.
"""

from __future__ import annotations


class SkillSyncError(Exception):
    """Base exception for all skillsync errors."""


class ManifestError(SkillSyncError):
    """Raised when a SKILL.md manifest is structurally invalid.

    The public parser converts this into an absence signal; it only
    escapes from the strict ``load_skill_manifest`` helper.
    """


class LockfileError(SkillSyncError):
    """Raised when lock file content does not match the expected schema.

    ``read_local_lock`` never lets this escape: corrupt content degrades
    to an empty lock instead.
    """


class InstallError(SkillSyncError):
    """Raised inside the installer when a single installation step fails.

    Converted into a failed ``InstallResult`` before it reaches the caller.
    """


class InvalidAgentError(SkillSyncError):
    """Raised when the caller names agents that do not exist.

    Attributes:
        invalid: The unknown agent names, in the order given.
        valid: Every known agent name.
    """

    def __init__(self, invalid: list[str], valid: list[str]) -> None:
        self.invalid = invalid
        self.valid = valid
        super().__init__(f"Invalid agents: {', '.join(invalid)}")
