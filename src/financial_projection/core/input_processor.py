# src/financial_projection/core/input_processor.py
"""
Input Processor

Validates and normalizes raw assumption inputs against a mode-specific
schema. Schemas are declared in data/input_schemas.yaml and evaluated
by a generic validator:

1. A supplied field is type checked; a mismatch is reported but the
   value still passes through
2. An absent field receives its default when one exists
3. Otherwise a required field (static flag or predicate over the fields
   already processed) is reported as missing
4. Projected series are forced to the projection horizon

Processing never stops on a bad field. Every problem is collected so
the caller can report all of them at once.
"""

import copy
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from ..config import (
    DEFAULT_MODE,
    DEFAULT_PROJECTION_YEARS,
    SUPPORTED_MODES,
    get_input_schemas,
    schema_path,
)
from ..utils.financial_utils import is_number, normalize_series
from .diagnostics import Diagnostic, DiagnosticKind, record

logger = logging.getLogger(__name__)

SOURCE = "input_processor"

_MISSING = object()

Predicate = Callable[[Mapping[str, Any]], bool]


def required_when(conditions: Mapping[str, Any]) -> Predicate:
    """
    Build a requiredness predicate from a field -> value mapping.

    The field becomes required when every listed field, among those
    already processed, holds the listed value.
    """
    expected = dict(conditions)

    def predicate(processed: Mapping[str, Any]) -> bool:
        return all(processed.get(key) == value for key, value in expected.items())

    return predicate


@dataclass(frozen=True)
class FieldSpec:
    """Declaration of a single input field."""
    name: str
    type: str
    default: Any = _MISSING
    required: Union[bool, Predicate] = False
    choices: Optional[Tuple[Any, ...]] = None
    projected: bool = False

    @property
    def has_default(self) -> bool:
        return self.default is not _MISSING

    def is_required(self, processed: Mapping[str, Any]) -> bool:
        if callable(self.required):
            return bool(self.required(processed))
        return bool(self.required)

    def default_value(self) -> Any:
        return copy.deepcopy(self.default)

    def check(self, value: Any) -> Optional[str]:
        """
        Lightweight type check.

        Returns:
            Description of the problem, or None when the value conforms
        """
        if self.type == "number":
            if not is_number(value):
                return f"Expected number, got {type(value).__name__}."
        elif self.type == "array":
            if not isinstance(value, (list, tuple)):
                return f"Expected array, got {type(value).__name__}."
            bad_items = [item for item in value if not is_number(item)]
            if bad_items:
                return (
                    f"Expected array of numbers, got array containing "
                    f"{type(bad_items[0]).__name__}."
                )
        elif self.type == "string":
            if not isinstance(value, str):
                return f"Expected string, got {type(value).__name__}."
        elif self.type == "object":
            if not isinstance(value, Mapping):
                return f"Expected object, got {type(value).__name__}."

        if self.choices is not None and value not in self.choices:
            allowed = ", ".join(str(c) for c in self.choices)
            return f"Expected one of {allowed}, got {value!r}."

        return None

    @classmethod
    def from_config(cls, name: str, definition: Mapping[str, Any]) -> "FieldSpec":
        """Build a field declaration from its YAML entry."""
        required: Union[bool, Predicate] = bool(definition.get("required", False))
        if "required_when" in definition:
            required = required_when(definition["required_when"])

        choices = definition.get("choices")

        return cls(
            name=name,
            type=definition.get("type", "number"),
            default=definition["default"] if "default" in definition else _MISSING,
            required=required,
            choices=tuple(choices) if choices is not None else None,
            projected=bool(definition.get("projected", False)),
        )


@dataclass(frozen=True)
class ModeSchema:
    """Field declarations for one mode."""
    mode: str
    assumptions: Tuple[FieldSpec, ...]
    valuation_assumptions: Tuple[FieldSpec, ...]


def build_schemas(document: Mapping[str, Any]) -> Dict[str, ModeSchema]:
    """Compile a mode-keyed schema document into ModeSchema objects."""
    schemas = {}
    for mode, sections in document.items():
        sections = sections or {}
        schemas[mode] = ModeSchema(
            mode=mode,
            assumptions=tuple(
                FieldSpec.from_config(name, definition or {})
                for name, definition in (sections.get("assumptions") or {}).items()
            ),
            valuation_assumptions=tuple(
                FieldSpec.from_config(name, definition or {})
                for name, definition in (sections.get("valuation_assumptions") or {}).items()
            ),
        )
    return schemas


@lru_cache(maxsize=4)
def _compiled_schemas(path: str) -> Dict[str, ModeSchema]:
    return build_schemas(get_input_schemas(Path(path)))


def get_schemas() -> Dict[str, ModeSchema]:
    """Compiled schemas for the configured schema file."""
    return _compiled_schemas(str(schema_path()))


@dataclass
class ValidatedInputs:
    """Output of the input processor."""
    mode: str
    assumptions: Dict[str, Any]
    valuation_assumptions: Dict[str, Any]
    historical_data: Dict[str, Any]
    errors: List[str] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    projection_years: int = DEFAULT_PROJECTION_YEARS

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            'mode': self.mode,
            'assumptions': self.assumptions,
            'valuation_assumptions': self.valuation_assumptions,
            'historical_data': self.historical_data,
            'errors': list(self.errors),
            'diagnostics': [d.to_dict() for d in self.diagnostics],
            'projection_years': self.projection_years,
        }


class _Collector:
    """Accumulates error strings and their matching diagnostics."""

    def __init__(self):
        self.errors: List[str] = []
        self.diagnostics: List[Diagnostic] = []

    def error(self, message: str, field_name: Optional[str] = None):
        self.errors.append(message)
        record(
            self.diagnostics,
            DiagnosticKind.VALIDATION_ERROR,
            message,
            SOURCE,
            logger,
            field=field_name,
        )

    def data_gap(self, message: str, field_name: Optional[str] = None):
        record(
            self.diagnostics,
            DiagnosticKind.DATA_GAP_WARNING,
            message,
            SOURCE,
            logger,
            field=field_name,
        )


def _process_section(
    specs: Tuple[FieldSpec, ...],
    raw_section: Any,
    label: str,
    collector: _Collector
) -> Dict[str, Any]:
    """
    Map one section of raw inputs onto its field declarations.

    Args:
        specs: Field declarations, in evaluation order
        raw_section: The caller-supplied mapping for this section
        label: Prefix used in messages ("" or "valuation ")
        collector: Error sink

    Returns:
        Processed values for the section
    """
    if raw_section is None:
        raw_section = {}
    elif not isinstance(raw_section, Mapping):
        collector.error(
            f"Invalid {label}assumptions: expected an object, got "
            f"{type(raw_section).__name__}."
        )
        raw_section = {}

    processed: Dict[str, Any] = {}

    for spec in specs:
        if spec.name in raw_section:
            value = raw_section[spec.name]
            problem = spec.check(value)
            if problem:
                collector.error(
                    f"Invalid type for {label}assumption {spec.name}. {problem}"
                    if label else f"Invalid type for {spec.name}. {problem}",
                    spec.name,
                )
            processed[spec.name] = list(value) if isinstance(value, (list, tuple)) else value
        elif spec.has_default:
            processed[spec.name] = spec.default_value()
        elif spec.is_required(processed):
            if label:
                collector.error(f"Missing required {label}input: {spec.name}", spec.name)
            else:
                collector.error(f"Missing required input: {spec.name}", spec.name)

    unknown = sorted(set(raw_section) - {spec.name for spec in specs})
    if unknown:
        logger.debug("Ignoring unknown %sassumptions: %s", label, ", ".join(unknown))

    return processed


def _normalize_projections(
    processed: Dict[str, Any],
    specs: Tuple[FieldSpec, ...],
    projection_years: int,
    collector: _Collector
):
    """Force every projected series to the projection horizon."""
    for spec in specs:
        if not spec.projected:
            continue
        value = processed.get(spec.name)
        if not isinstance(value, list):
            continue

        if not value:
            collector.error(f"Empty projection series for {spec.name}", spec.name)
            if spec.has_default:
                value = spec.default_value()
            else:
                del processed[spec.name]
                continue

        processed[spec.name] = normalize_series(value, projection_years)


def process_inputs(
    raw_inputs: Optional[Mapping[str, Any]],
    mode: str,
    projection_years: int = DEFAULT_PROJECTION_YEARS,
    schemas: Optional[Mapping[str, ModeSchema]] = None
) -> ValidatedInputs:
    """
    Validate and normalize raw inputs for the given mode.

    Args:
        raw_inputs: Mapping with optional 'assumptions',
            'valuation_assumptions' and 'historical_data' sections
        mode: "founder" or "investor"
        projection_years: Projection horizon
        schemas: Compiled schemas (defaults to the packaged YAML)

    Returns:
        ValidatedInputs with every problem listed in errors
    """
    collector = _Collector()
    schemas = schemas if schemas is not None else get_schemas()
    if raw_inputs is None:
        raw_inputs = {}
    elif not isinstance(raw_inputs, Mapping):
        collector.error(
            f"Invalid inputs: expected an object, got {type(raw_inputs).__name__}."
        )
        raw_inputs = {}

    if mode not in schemas:
        collector.error(
            f"Unknown mode {mode!r}. Expected one of "
            f"{', '.join(SUPPORTED_MODES)}; {DEFAULT_MODE} defaults applied."
        )
        schema = schemas[DEFAULT_MODE]
    else:
        schema = schemas[mode]

    if isinstance(projection_years, bool) or not isinstance(projection_years, int) or projection_years < 1:
        collector.error(
            f"Invalid projection horizon {projection_years!r}; "
            f"using {DEFAULT_PROJECTION_YEARS} years."
        )
        projection_years = DEFAULT_PROJECTION_YEARS

    assumptions = _process_section(
        schema.assumptions,
        raw_inputs.get("assumptions"),
        "",
        collector,
    )
    valuation_assumptions = _process_section(
        schema.valuation_assumptions,
        raw_inputs.get("valuation_assumptions"),
        "valuation ",
        collector,
    )

    historical_data = raw_inputs.get("historical_data") or {}
    if not isinstance(historical_data, Mapping):
        collector.error(
            f"Invalid historical_data: expected an object, got "
            f"{type(historical_data).__name__}."
        )
        historical_data = {}
    historical_data = dict(historical_data)

    if schema.mode == "investor" and not historical_data:
        collector.data_gap(
            "Investor mode selected but no historical data provided. "
            "Model will rely on base assumptions if available.",
            "historical_data",
        )

    _normalize_projections(assumptions, schema.assumptions, projection_years, collector)

    return ValidatedInputs(
        mode=schema.mode,
        assumptions=assumptions,
        valuation_assumptions=valuation_assumptions,
        historical_data=historical_data,
        errors=collector.errors,
        diagnostics=collector.diagnostics,
        projection_years=projection_years,
    )
