"""Skill Inspector: security, spec-compliance and portability audits for agent skills."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
