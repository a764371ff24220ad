"""Squiggle evaluator adapter module.

The Squiggle language itself lives in the ``@quri/squiggle-lang`` JavaScript package.
This module runs it through a small Node.js bridge script and decodes the bridge's JSON
output into an :data:`~squiggle_mcp.schema.EvaluationOutcome`.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Protocol

import anyio
from pydantic import ValidationError

from squiggle_mcp.schema import EvaluationFailure, EvaluationSuccess, parse_outcome
from squiggle_mcp.settings import Settings, settings

logger = logging.getLogger("squiggle_mcp.evaluator")

BRIDGE_SCRIPT = Path(__file__).parent / "bridge" / "run_squiggle.mjs"


class EvaluatorError(Exception):
    """Exception raised when the evaluator itself could not produce an outcome.

    Invalid Squiggle code is *not* an error at this level; it comes back as an
    :class:`~squiggle_mcp.schema.EvaluationFailure`.
    """

    def __init__(self, message: str, stderr: str | None = None):
        """Initialize EvaluatorError.

        Args:
            message: Error message
            stderr: Whatever the bridge process wrote to stderr, if anything
        """
        self.stderr = stderr
        super().__init__(f"Squiggle evaluator error: {message}")


class SquiggleEvaluator(Protocol):
    """Anything that can turn Squiggle source into an evaluation outcome."""

    async def evaluate(self, code: str) -> EvaluationSuccess | EvaluationFailure: ...


class NodeSquiggleEvaluator:
    """Evaluate Squiggle code in a fresh Node.js process per call."""

    def __init__(
        self,
        node_executable: str = settings.node_executable,
        bridge_script: Path | None = settings.bridge_script,
        squiggle_lang_module: str = settings.squiggle_lang_module,
    ):
        """Initialize the evaluator.

        Args:
            node_executable: Node.js interpreter to run
            bridge_script: Bridge script to execute, defaults to the packaged one
            squiggle_lang_module: Module specifier the bridge imports ``run`` from
        """
        self.node_executable = node_executable
        self.bridge_script = bridge_script or BRIDGE_SCRIPT
        self.squiggle_lang_module = squiggle_lang_module

    @classmethod
    def from_settings(cls, config: Settings) -> NodeSquiggleEvaluator:
        return cls(
            node_executable=config.node_executable,
            bridge_script=config.bridge_script,
            squiggle_lang_module=config.squiggle_lang_module,
        )

    @property
    def command(self) -> list[str]:
        return [self.node_executable, str(self.bridge_script)]

    def bridge_available(self) -> bool:
        """Return True when Node.js is on the path and can import the Squiggle package.

        This is a blocking check meant for startup diagnostics, not for the request path.
        """
        node = shutil.which(self.node_executable)
        if node is None:
            return False

        probe = (
            f"import({json.dumps(self.squiggle_lang_module)})"
            ".then(() => process.exit(0), () => process.exit(1))"
        )
        try:
            completed = subprocess.run(
                [node, "--input-type=module", "-e", probe],
                cwd=Path(self.bridge_script).parent,
                capture_output=True,
                timeout=30,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning(f"Cannot probe the Squiggle bridge: {e}")
            return False
        return completed.returncode == 0

    async def evaluate(self, code: str) -> EvaluationSuccess | EvaluationFailure:
        """Run *code* and return its outcome.

        Args:
            code: Squiggle source text, passed to the bridge on stdin

        Returns:
            The decoded outcome.

        Raises:
            EvaluatorError: If the bridge could not be started, exited with an error,
                or produced output that is not a valid outcome document.
        """
        env = {**os.environ, "SQUIGGLE_LANG_MODULE": self.squiggle_lang_module}
        logger.debug("Evaluating %d characters of Squiggle code", len(code))

        try:
            process = await anyio.run_process(
                self.command, input=code.encode("utf-8"), check=False, env=env
            )
        except OSError as e:
            raise EvaluatorError(f"cannot start {self.node_executable}: {e}") from e

        stderr = process.stderr.decode("utf-8", errors="replace") if process.stderr else ""
        if process.returncode != 0:
            logger.debug("Bridge stderr: %s", stderr)
            raise EvaluatorError(f"bridge exited with status {process.returncode}", stderr)

        return self.decode(process.stdout, stderr)

    @staticmethod
    def decode(
        raw: bytes | str, stderr: str | None = None
    ) -> EvaluationSuccess | EvaluationFailure:
        """Decode one bridge output document."""
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise EvaluatorError(f"bridge output is not JSON: {e}", stderr) from e

        try:
            return parse_outcome(data)
        except ValidationError as e:
            raise EvaluatorError(f"invalid outcome document: {e}", stderr) from e


def warn_if_bridge_missing(evaluator: NodeSquiggleEvaluator) -> None:
    if not evaluator.bridge_available():
        logger.warning(
            f"Cannot import {evaluator.squiggle_lang_module} with {evaluator.node_executable}; "
            "run-squiggle calls will fail until it is installed"
        )
