"""Common pytest configuration and fixtures for tests."""

import logging
from collections.abc import Generator

import pytest

from squiggle_mcp.core import SquiggleMCPServerCore
from squiggle_mcp.schema import (
    Binding,
    EvaluationFailure,
    EvaluationSuccess,
    OpaqueValue,
    RecordValue,
    ScalarValue,
    SequenceValue,
)

# Setup logging
logger = logging.getLogger("squiggle_mcp_tests")
logger.setLevel(logging.DEBUG)
log_handler = logging.StreamHandler()
log_handler.setLevel(logging.DEBUG)
formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
log_handler.setFormatter(formatter)
logger.addHandler(log_handler)


class FakeEvaluator:
    """Evaluator double that returns a canned outcome (or raises) and records calls."""

    def __init__(
        self,
        outcome: EvaluationSuccess | EvaluationFailure | None = None,
        error: Exception | None = None,
    ) -> None:
        self.outcome = outcome or EvaluationSuccess()
        self.error = error
        self.calls: list[str] = []

    async def evaluate(self, code: str) -> EvaluationSuccess | EvaluationFailure:
        self.calls.append(code)
        if self.error is not None:
            raise self.error
        return self.outcome


@pytest.fixture
def mixed_outcome() -> EvaluationSuccess:
    """A successful outcome with one binding of every kind, summary included."""
    return EvaluationSuccess(
        bindings=[
            Binding(name="x", value=ScalarValue(value=2, payload_json="2")),
            Binding(
                name="summary",
                value=SequenceValue(items=["a", "b"], payload_json='["a","b"]'),
            ),
            Binding(name="point", value=RecordValue(payload_json='{"lat":1.5,"lon":-3}')),
            Binding(
                name="dist",
                value=OpaqueValue(type_name="Dist", payload_json='{"type":"Normal","mean":5}'),
            ),
        ]
    )


@pytest.fixture
def failure_outcome() -> EvaluationFailure:
    return EvaluationFailure(diagnostic="Parse error\n  --> line 1, column 4\nExpected expression")


@pytest.fixture
def fake_evaluator(mixed_outcome: EvaluationSuccess) -> FakeEvaluator:
    return FakeEvaluator(mixed_outcome)


@pytest.fixture
def core(fake_evaluator: FakeEvaluator) -> Generator[SquiggleMCPServerCore]:
    """Server core wired to the fake evaluator, with the example resource published."""
    yield SquiggleMCPServerCore(evaluator=fake_evaluator, expose_resources=True)


@pytest.fixture
def make_evaluator() -> type[FakeEvaluator]:
    """Expose the evaluator double to tests that need a custom outcome or error."""
    return FakeEvaluator
