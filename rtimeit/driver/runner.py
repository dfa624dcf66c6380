# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Comparison runner: the build & run state machine.

One run walks through:

    CREATED -> SOURCE_WRITTEN -> COMPILED -> EXECUTED -> SUCCEEDED
                     \\              \\           \\
                      +--------------+-----------+--> FAILED

  1. Synthesize the project and write it into a fresh workspace
  2. Compile it with cargo (bench profile, plus --features perf for counters)
  3. Run the executable and capture Criterion's report
  4. Parse one MeasurementResult per candidate

All candidates live in one program, so a compile error in any of them fails
the whole run and nothing is measured. The workspace is removed whichever
way the run ends.
"""

from pathlib import Path

from rtimeit.config.schema import ToolchainConfig
from rtimeit.driver.exceptions import RunError
from rtimeit.driver.models import RunState
from rtimeit.driver.toolchain import build_benchmark, run_benchmark
from rtimeit.driver.workspace import Workspace
from rtimeit.harness.synthesizer import synthesize
from rtimeit.logging.logger import get_logger
from rtimeit.results.models import MeasurementResult
from rtimeit.results.parser import parse_measurements
from rtimeit.snippet.models import Snippet

logger = get_logger(__name__)


class ComparisonRun:
    """
    A single pass through the pipeline for one Snippet.

    Instances are single-use: call `execute()` once. `state` records how far
    the run got, which is what the tests and the failure log look at.
    """

    def __init__(
        self,
        snippet: Snippet,
        config: ToolchainConfig,
        verbose: bool = False,
    ) -> None:
        self.snippet = snippet
        self.config = config
        self.verbose = verbose
        self.state = RunState.CREATED
        self.workspace_dir: Path | None = None

    def _transition(self, new_state: RunState) -> None:
        logger.debug(
            "State transition",
            extra={"from": self.state.value, "to": new_state.value},
        )
        self.state = new_state

    def execute(self) -> list[MeasurementResult]:
        """
        Run the pipeline to completion.

        Returns:
            One MeasurementResult per candidate, in candidate order.

        Raises:
            BuildError: cargo rejected the generated project.
            RunError: the benchmark failed or its output was incomplete.
        """
        if self.state is not RunState.CREATED:
            raise RuntimeError(f"ComparisonRun already used (state={self.state.value})")

        files = synthesize(self.snippet)
        base_dir = (
            Path(self.config.workspace_parent).expanduser()
            if self.config.workspace_parent is not None
            else None
        )

        try:
            with Workspace(files, base_dir=base_dir) as workspace_dir:
                self.workspace_dir = workspace_dir
                self._transition(RunState.SOURCE_WRITTEN)

                build = build_benchmark(workspace_dir, self.snippet.mode, self.config)
                self._transition(RunState.COMPILED)

                run = run_benchmark(
                    build.executable, workspace_dir, self.config, verbose=self.verbose,
                )
                self._transition(RunState.EXECUTED)

                results = parse_measurements(run.stdout, self.snippet.candidates, self.snippet.mode)
                _check_complete(self.snippet, results, run.stdout)
        except BaseException as err:
            logger.debug(
                "Comparison aborted",
                extra={"state": self.state.value, "error": str(err) or type(err).__name__},
            )
            self._transition(RunState.FAILED)
            raise

        self._transition(RunState.SUCCEEDED)
        logger.info(
            "Comparison finished",
            extra={"candidates": len(results), "unit": self.snippet.mode.unit},
        )
        return results


def _check_complete(snippet: Snippet, results: list[MeasurementResult], output: str) -> None:
    """Exactly one result per candidate, in candidate order, or the run failed."""
    expected = snippet.candidate_ids
    actual = [result.candidate_id for result in results]
    if actual != expected:
        raise RunError(
            f"Expected results for {expected}, got {actual}",
            output=output,
        )


def run_comparison(
    snippet: Snippet,
    config: ToolchainConfig,
    verbose: bool = False,
) -> list[MeasurementResult]:
    """Build, run and measure every candidate in `snippet`. See ComparisonRun."""
    return ComparisonRun(snippet, config, verbose=verbose).execute()
