"""totalitarian: Tagged unions with exhaustive, type-directed dispatch."""

from .descriptors import (
    ClassType,
    GenericType,
    TypeDescriptor,
    TypeKind,
    UnionType,
    descriptor_of,
    descriptor_of_value,
    erased_members,
    is_instance,
    is_subtype,
    union_of,
)
from .errors import DisjunctError, IncompleteCoverage, NoMatchingHandler, TypeMismatch
from .result import Ok, Err, Result
from .disjunct import Disjunct, OfType
from .cases import OnType, WhenClause, case, on
from .shape import ResultShape, Unified, Wrapped, result_shape
from .coverage import (
    CoverageResult,
    CoverageStatus,
    Diagnostic,
    MemberCoverage,
    Severity,
    check_coverage,
    prove_coverage,
)
from .dispatch import DispatchTable, dispatch
from .report import format_report, report_json
from .render import render_coverage_table

__all__ = [
    # Descriptors
    "ClassType", "GenericType", "TypeDescriptor", "TypeKind", "UnionType",
    "descriptor_of", "descriptor_of_value", "erased_members", "is_instance", "is_subtype", "union_of",
    # Errors
    "DisjunctError", "IncompleteCoverage", "NoMatchingHandler", "TypeMismatch",
    # Result
    "Ok", "Err", "Result",
    # Disjunct
    "Disjunct", "OfType",
    # Cases
    "OnType", "WhenClause", "case", "on",
    # Shape
    "ResultShape", "Unified", "Wrapped", "result_shape",
    # Coverage
    "CoverageResult", "CoverageStatus", "Diagnostic", "MemberCoverage",
    "Severity", "check_coverage", "prove_coverage",
    # Dispatch
    "DispatchTable", "dispatch",
    # Reports
    "format_report", "report_json", "render_coverage_table",
]
