"""Type definitions for the Squiggle MCP Server.

This module defines the Pydantic models used across the server: the tool request,
the closed set of bound value kinds an evaluation can produce, and the
success/failure outcome of a single evaluation.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter

SUMMARY_BINDING = "summary"


class BaseToolRequest(BaseModel):
    """Base class for all tool request models."""

    model_config = {
        "extra": "forbid",
        "validate_assignment": True,
    }


class RunSquiggleRequest(BaseToolRequest):
    """Request model for the run-squiggle tool."""

    code: str = Field(..., description="The Squiggle code to run.")
    render_summary: str = Field(
        default="false",
        description=(
            "If 'true', then the binding to 'summary' will be interpreted as an array of strings "
            "and be rendered into a single string output separated by newlines. Default 'false'."
        ),
    )

    @property
    def summary_requested(self) -> bool:
        # Only the exact string enables summary mode; anything else is falsy.
        return self.render_summary == "true"


#####################################################################
### Evaluation outcome models                                     ###
### Produced by the evaluator adapter, consumed by the formatter  ###
#####################################################################


class BaseOutcomeModel(BaseModel):
    """Base class for models decoded from evaluator output."""

    model_config = {
        "extra": "ignore",
        "frozen": True,
    }


class ScalarValue(BaseOutcomeModel):
    """A number, string or boolean."""

    kind: Literal["scalar"] = "scalar"
    value: str | int | float | bool | None = None
    payload_json: str = Field(..., description="Canonical JSON text of the value")


class SequenceValue(BaseOutcomeModel):
    """An array whose elements each expose a scalar ``value`` field.

    ``items`` holds each element's value as ``Array.prototype.join`` renders it, so
    ``null`` arrives as an empty string and numbers keep their JavaScript spelling.
    """

    kind: Literal["sequence"] = "sequence"
    items: list[str] = Field(default_factory=list, description="Item values, already stringified")
    payload_json: str = Field(..., description="Canonical JSON text of the value")


class RecordValue(BaseOutcomeModel):
    """A dictionary of named values."""

    kind: Literal["record"] = "record"
    payload_json: str


class OpaqueValue(BaseOutcomeModel):
    """Anything else: distributions, sample sets, lambdas, plots, ..."""

    kind: Literal["opaque"] = "opaque"
    type_name: str = Field(default="", description="Evaluator-side type tag")
    payload_json: str


BoundValue = Annotated[
    ScalarValue | SequenceValue | RecordValue | OpaqueValue,
    Field(discriminator="kind"),
]


class Binding(BaseOutcomeModel):
    name: str
    value: BoundValue


class EvaluationSuccess(BaseOutcomeModel):
    """Successful evaluation; ``bindings`` keeps the environment's iteration order."""

    status: Literal["success"] = "success"
    bindings: list[Binding] = Field(default_factory=list)

    def get(self, name: str) -> Binding | None:
        return next((binding for binding in self.bindings if binding.name == name), None)


class EvaluationFailure(BaseOutcomeModel):
    """Failed evaluation with the evaluator's full diagnostic text."""

    status: Literal["failure"] = "failure"
    diagnostic: str


EvaluationOutcome = Annotated[
    EvaluationSuccess | EvaluationFailure,
    Field(discriminator="status"),
]

_outcome_adapter: TypeAdapter[EvaluationSuccess | EvaluationFailure] = TypeAdapter(
    EvaluationOutcome
)


def parse_outcome(data: Any) -> EvaluationSuccess | EvaluationFailure:
    """Validate a decoded evaluator document into an outcome.

    Raises:
        pydantic.ValidationError: If *data* is not a well-formed outcome.
    """
    return _outcome_adapter.validate_python(data)
