"""Render an evaluation outcome as the single text payload returned by run-squiggle.

Three paths, first match wins:

1. success + a ``summary`` binding + summary rendering requested: the summary's
   item values joined by newlines;
2. success: one ``name: <json>`` line per binding, in environment order;
3. failure: ``Error: "`` followed by the diagnostic.

Everything here is pure, so formatting the same outcome twice gives identical text.
"""

from __future__ import annotations

import logging
from typing import assert_never

from squiggle_mcp.schema import (
    SUMMARY_BINDING,
    EvaluationFailure,
    EvaluationSuccess,
    OpaqueValue,
    RecordValue,
    ScalarValue,
    SequenceValue,
)

logger = logging.getLogger("squiggle_mcp.formatter")

# The opening quote is left unbalanced; clients already parse this exact prefix.
ERROR_PREFIX = 'Error: "'


def serialize_value(value: ScalarValue | SequenceValue | RecordValue | OpaqueValue) -> str:
    """Return the canonical (compact JSON) form of a bound value, as the evaluator wrote it."""
    match value:
        case ScalarValue() | SequenceValue() | RecordValue() | OpaqueValue():
            return value.payload_json
        case _:
            assert_never(value)


def render_summary_items(value: SequenceValue) -> str:
    return "\n".join(value.items)


def render_bindings(outcome: EvaluationSuccess) -> str:
    return "\n".join(
        f"{binding.name}: {serialize_value(binding.value)}" for binding in outcome.bindings
    )


def render_failure(outcome: EvaluationFailure) -> str:
    return f"{ERROR_PREFIX}{outcome.diagnostic}"


def format_outcome(outcome: EvaluationSuccess | EvaluationFailure, render_summary: bool) -> str:
    """Flatten *outcome* into one text string.

    Args:
        outcome: Result of a single evaluation
        render_summary: Whether the caller opted into summary rendering

    Returns:
        The formatted text. An empty binding environment gives an empty string.
    """
    match outcome:
        case EvaluationSuccess():
            summary = outcome.get(SUMMARY_BINDING) if render_summary else None
            if summary is not None:
                if isinstance(summary.value, SequenceValue):
                    return render_summary_items(summary.value)
                logger.warning(
                    "Binding %r is a %s, not an array; rendering all bindings instead",
                    SUMMARY_BINDING,
                    summary.value.kind,
                )
            return render_bindings(outcome)
        case EvaluationFailure():
            return render_failure(outcome)
        case _:
            assert_never(outcome)
