# src/financial_projection/core/diagnostics.py
"""
Diagnostics

Structured warnings returned alongside every result. Nothing in the
core raises on bad data; problems are recorded here and mirrored to the
module logger so callers can decide whether to reject a request.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class DiagnosticKind(Enum):
    """Categories of recorded problems."""
    VALIDATION_ERROR = "validation_error"
    COMPUTATION_WARNING = "computation_warning"
    DATA_GAP_WARNING = "data_gap_warning"


@dataclass(frozen=True)
class Diagnostic:
    """A single problem found while processing a request."""
    kind: DiagnosticKind
    message: str
    source: str = ""
    field: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            'kind': self.kind.value,
            'message': self.message,
            'source': self.source,
            'field': self.field,
        }


def record(
    diagnostics: List[Diagnostic],
    kind: DiagnosticKind,
    message: str,
    source: str,
    logger: logging.Logger,
    field: Optional[str] = None
) -> Diagnostic:
    """
    Append a diagnostic and emit it through the given logger.

    Validation problems are logged at INFO since they are also returned
    in the error list; everything else is a WARNING.
    """
    diagnostic = Diagnostic(kind=kind, message=message, source=source, field=field)
    diagnostics.append(diagnostic)

    level = logging.INFO if kind is DiagnosticKind.VALIDATION_ERROR else logging.WARNING
    logger.log(level, "[%s] %s", source, message)

    return diagnostic


def of_kind(diagnostics: List[Diagnostic], kind: DiagnosticKind) -> List[Diagnostic]:
    """Filter diagnostics by kind."""
    return [d for d in diagnostics if d.kind is kind]
