"""
Batch execution of command strings such as ``MMRMLM``.

Letters run left to right. The first failure stops the batch: later
letters are never attempted and the moves already made stay applied.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
import re

from telemetry.logger import NullTelemetry, Telemetry
from .commands import CommandFactory, CommandResult
from .errors import ErrorKind, UnknownCommandError
from .rover import Rover
from .terrain import Terrain

BATCH_PATTERN = re.compile(r"^[MLRS]+$")


@dataclass
class BatchResult:
    """Results for the commands of a batch that actually ran."""

    batch: str
    results: List[CommandResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(r.ok for r in self.results)

    @property
    def failed(self) -> Optional[CommandResult]:
        """The failing result, if the batch stopped early."""
        for r in self.results:
            if not r.ok:
                return r
        return None

    @property
    def executed(self) -> str:
        """Letters that ran successfully, in order."""
        return "".join(r.letter for r in self.results if r.ok)


def parse_batch(text: str) -> str:
    """Normalise a batch string to upper case and validate it."""
    letters = text.strip().upper()
    if not BATCH_PATTERN.match(letters):
        raise UnknownCommandError(text)
    return letters


def execute_batch(
    letters: str,
    rover: Rover,
    terrain: Terrain,
    factory: Optional[CommandFactory] = None,
    telemetry: Optional[Telemetry] = None,
) -> BatchResult:
    """Run ``letters`` one command at a time, stopping at the first failure."""
    telemetry = telemetry if telemetry is not None else NullTelemetry()
    factory = factory if factory is not None else CommandFactory(telemetry)
    outcome = BatchResult(batch=letters)
    for letter in letters:
        try:
            command = factory.create_command(letter, rover, terrain)
        except UnknownCommandError as exc:
            outcome.results.append(
                CommandResult(
                    ok=False,
                    letter=letter,
                    message=str(exc),
                    position=rover.position,
                    direction=rover.direction,
                    error_kind=ErrorKind.UNKNOWN_COMMAND,
                )
            )
            break
        result = command.execute()
        outcome.results.append(result)
        if not result.ok:
            break

    if outcome.ok:
        telemetry.log_event("info", f"Batch commands executed: {letters}", batch=letters)
    else:
        telemetry.log_event(
            "warn",
            f"Batch stopped after {len(outcome.results)} of {len(letters)} commands",
            batch=letters,
            executed=outcome.executed,
        )
    return outcome
