"""Orchestration and scoring engine for skill inspections.

Submodules
----------
- ``models``: ``CheckOutcome``, ``OutcomeStatus``, ``ScoreRange``,
  ``InspectionReport``.
- ``engine``: ``InspectionEngine``, ``build_report`` and ``run_inspection``.

All public names are re-exported here::

    from skillinspector.core.engine import InspectionEngine, InspectionReport
"""

from skillinspector.core.engine.models import (
    CheckOutcome,
    InspectionReport,
    OutcomeStatus,
    ScoreRange,
)
from skillinspector.core.engine.engine import (
    DEFAULT_CHECK_TIMEOUT,
    InspectionEngine,
    build_report,
    run_inspection,
)

__all__ = [
    "DEFAULT_CHECK_TIMEOUT",
    "CheckOutcome",
    "InspectionEngine",
    "InspectionReport",
    "OutcomeStatus",
    "ScoreRange",
    "build_report",
    "run_inspection",
]
