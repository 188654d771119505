"""Skill Inspector exception hierarchy.

All public exceptions inherit from SkillInspectorError, giving callers a
single base class to catch when they want to handle any Skill Inspector
failure without swallowing unrelated errors.
"""


class SkillInspectorError(Exception):
    """Base exception for all Skill Inspector errors."""


class ConfigError(SkillInspectorError):
    """Raised when the engine or a configuration file is misconfigured.

    Covers invalid per-check timeouts, duplicate checker names, bad
    category caps, and malformed configuration files. Always raised
    before any checker is launched.
    """


class DiscoveryError(SkillInspectorError):
    """Raised when a skill file cannot be read or parsed.

    Covers unreadable files, malformed YAML frontmatter, and frontmatter
    missing the required ``name`` or ``description`` fields.
    """


class CheckerError(SkillInspectorError):
    """Raised by checker implementations to signal a failed run.

    The inspection engine converts this, like any other exception raised
    by a checker, into a ``Failed`` outcome. It never aborts the run.
    """
