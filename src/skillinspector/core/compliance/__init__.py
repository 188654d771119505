"""Compliance mapping from findings to external risk taxonomies.

Submodules
----------
- ``catalog``: ``ComplianceRule`` and the ordered ``COMPLIANCE_RULES``.
- ``mapper``: ``map_compliance`` and ``affected_frameworks``.
"""

from skillinspector.core.compliance.catalog import COMPLIANCE_RULES, ComplianceRule
from skillinspector.core.compliance.mapper import affected_frameworks, map_compliance

__all__ = [
    "COMPLIANCE_RULES",
    "ComplianceRule",
    "affected_frameworks",
    "map_compliance",
]
