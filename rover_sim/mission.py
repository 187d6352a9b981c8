"""
Interactive mission control loop.

Reads terrain, rover and command input from a text source, drives the
command engine and writes status and error lines to a text sink. The
source and sink are plain callables (``input`` and ``print`` by default)
so the loop can be scripted.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple, TypeVar
import random
import re

from telemetry.logger import NullTelemetry, Telemetry
from .batch import BATCH_PATTERN, BatchResult, execute_batch, parse_batch
from .commands import CommandFactory
from .config import MissionConfig
from .errors import ConfigError, RetryExhaustedError, RoverSimError, UnknownCommandError
from .geometry_utils import Direction
from .render import render_ascii
from .rover import Rover
from .terrain import Terrain

T = TypeVar("T")

COMMAND_PATTERN = re.compile(r"^[MLRSQ]+$")

HELP_LINES = (
    "Commands: M (move), L (left), R (right), S (status), B (batch), Q (quit)",
    "Batch example: MMRMLM (executes multiple commands)",
)


def retry_operation(
    operation: Callable[[], T],
    max_retries: int = 3,
    telemetry: Optional[Telemetry] = None,
) -> T:
    """Call ``operation`` until it returns, retrying on ValueError.

    Only input acquisition is retried this way; command execution never is.
    Raises RetryExhaustedError once ``max_retries`` attempts have failed.
    """
    if max_retries < 1:
        raise ValueError("max_retries must be at least 1")
    telemetry = telemetry if telemetry is not None else NullTelemetry()
    last_message = ""
    for attempt in range(1, max_retries + 1):
        try:
            return operation()
        except ValueError as exc:
            last_message = str(exc)
            telemetry.log_event(
                "warn",
                f"Transient error: {last_message}. Attempt {attempt}/{max_retries}",
                attempt=attempt,
            )
    telemetry.log_event("error", f"Failed after {max_retries} attempts: {last_message}")
    raise RetryExhaustedError(max_retries, last_message)


def parse_int(text: str, name: str, minimum: Optional[int] = None, maximum: Optional[int] = None) -> int:
    """Parse a bounded integer, raising ValueError with a user-facing message."""
    try:
        value = int(text.strip())
    except ValueError:
        value = None
    if value is None or (minimum is not None and value < minimum) or (
        maximum is not None and value > maximum
    ):
        if minimum is not None and maximum is not None:
            raise ValueError(f"Invalid {name} ({minimum}-{maximum})")
        if minimum == 1:
            raise ValueError(f"{name.capitalize()} must be a positive integer")
        if minimum == 0:
            raise ValueError(f"{name.capitalize()} must be non-negative")
        raise ValueError(f"{name.capitalize()} must be an integer")
    return value


class MissionControl:
    """Text-driven mission: set up terrain and rover, then run commands.

    Parameters
    ----------
    config : MissionConfig, optional
        Preset terrain/rover values; anything missing is prompted for.
    input_fn : callable
        Returns one line of user input for a prompt. EOFError ends the mission.
    output_fn : callable
        Receives each human-readable output line.
    telemetry : Telemetry, optional
        Event sink shared with the terrain, rover and commands.
    """

    def __init__(
        self,
        config: Optional[MissionConfig] = None,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
        telemetry: Optional[Telemetry] = None,
    ) -> None:
        self.config = config if config is not None else MissionConfig()
        self.input_fn = input_fn
        self.output_fn = output_fn
        self.telemetry = telemetry if telemetry is not None else NullTelemetry()
        self.factory = CommandFactory(self.telemetry)
        self.terrain: Optional[Terrain] = None
        self.rover: Optional[Rover] = None
        self.running = False

    # ------------------------------------------------------------------
    # Input acquisition
    # ------------------------------------------------------------------
    def ask(self, prompt: str, parse: Callable[[str], T]) -> T:
        """Prompt until ``parse`` accepts the answer, up to ``max_retries`` times."""

        def attempt() -> T:
            try:
                return parse(self.input_fn(prompt))
            except ValueError as exc:
                self.output_fn(f"Invalid input: {exc}")
                raise

        return retry_operation(attempt, self.config.mission.max_retries, self.telemetry)

    def _ask_terrain(self) -> Terrain:
        cfg = self.config.terrain
        if cfg.map is not None:
            try:
                return Terrain.from_map_file(cfg.map, telemetry=self.telemetry)
            except (OSError, ValueError, KeyError, TypeError, IndexError) as exc:
                raise ConfigError(f"Cannot load map {cfg.map}: {exc}") from exc

        width = cfg.width
        if width is None:
            width = self.ask(
                "Enter terrain width (positive integer): ",
                lambda s: parse_int(s, "width", minimum=1),
            )
        height = cfg.height
        if height is None:
            height = self.ask(
                "Enter terrain height (positive integer): ",
                lambda s: parse_int(s, "height", minimum=1),
            )

        if cfg.random_obstacles is not None:
            exclude: List[Tuple[int, int]] = []
            if self.config.rover.x is not None and self.config.rover.y is not None:
                exclude.append((self.config.rover.x, self.config.rover.y))
            try:
                return Terrain.with_random_obstacles(
                    width,
                    height,
                    cfg.random_obstacles,
                    random.Random(cfg.seed),
                    exclude=exclude,
                    telemetry=self.telemetry,
                )
            except ValueError as exc:
                raise ConfigError(f"terrain.random_obstacles: {exc}") from exc

        obstacles = list(cfg.obstacles)
        if not obstacles and not cfg.is_complete:
            count = self.ask(
                "Enter number of obstacles (non-negative): ",
                lambda s: parse_int(s, "obstacle count", minimum=0),
            )
            for i in range(count):
                ox = self.ask(
                    f"Enter obstacle {i + 1} x-coordinate (0-{width - 1}): ",
                    lambda s: parse_int(s, "x-coordinate", 0, width - 1),
                )
                oy = self.ask(
                    f"Enter obstacle {i + 1} y-coordinate (0-{height - 1}): ",
                    lambda s: parse_int(s, "y-coordinate", 0, height - 1),
                )
                obstacles.append((ox, oy))
        return Terrain(width, height, obstacles, telemetry=self.telemetry)

    def _ask_rover(self, terrain: Terrain) -> Rover:
        cfg = self.config.rover
        if cfg.x is not None and not 0 <= cfg.x < terrain.width:
            raise ConfigError(f"Rover start x {cfg.x} is outside the terrain")
        if cfg.y is not None and not 0 <= cfg.y < terrain.height:
            raise ConfigError(f"Rover start y {cfg.y} is outside the terrain")
        if cfg.x is not None and cfg.y is not None and terrain.has_obstacle(cfg.x, cfg.y):
            raise ConfigError(f"Rover start ({cfg.x}, {cfg.y}) is blocked by an obstacle")
        if cfg.is_complete:
            return Rover(cfg.x, cfg.y, cfg.direction, telemetry=self.telemetry)

        def parse_start_x(text: str) -> int:
            value = parse_int(text, "starting x-coordinate", 0, terrain.width - 1)
            if cfg.y is not None and terrain.has_obstacle(value, cfg.y):
                raise ValueError(f"Obstacle at starting position ({value}, {cfg.y})")
            return value

        def parse_start_y(text: str) -> int:
            value = parse_int(text, "starting y-coordinate", 0, terrain.height - 1)
            if terrain.has_obstacle(x, value):
                raise ValueError(f"Obstacle at starting position ({x}, {value})")
            return value

        x = cfg.x
        if x is None:
            x = self.ask(
                f"Enter rover starting x-coordinate (0-{terrain.width - 1}): ",
                parse_start_x,
            )
        y = cfg.y
        if y is None:
            y = self.ask(
                f"Enter rover starting y-coordinate (0-{terrain.height - 1}): ",
                parse_start_y,
            )
        direction = cfg.direction
        if direction is None:
            direction = self.ask("Enter rover direction (N, S, E, W): ", Direction.parse)
        return Rover(x, y, direction, telemetry=self.telemetry)

    def initialize(self) -> Tuple[Rover, Terrain]:
        """Build the terrain and rover from config and prompts."""
        self.output_fn("Initializing Mars Rover Mission...")
        self.terrain = self._ask_terrain()
        self.rover = self._ask_rover(self.terrain)
        self.telemetry.log_event("info", "Rover mission initialized successfully")
        if self.config.mission.show_map:
            self.output_fn(render_ascii(self.terrain, self.rover))
        return self.rover, self.terrain

    # ------------------------------------------------------------------
    # Command handling
    # ------------------------------------------------------------------
    @staticmethod
    def _parse_command_line(text: str) -> str:
        line = text.strip().upper()
        if line != "B" and not COMMAND_PATTERN.match(line):
            raise ValueError(
                "Invalid input. Use M, L, R, S, Q, or a sequence of M, L, R, S (e.g., MMRMLM)"
            )
        return line

    @staticmethod
    def _parse_batch_line(text: str) -> str:
        line = text.strip().upper()
        if not BATCH_PATTERN.match(line):
            raise ValueError("Batch commands must be M, L, R, or S")
        return line

    def run_batch(self, letters: str) -> BatchResult:
        """Execute a validated batch and report each executed command."""
        if self.rover is None or self.terrain is None:
            raise RuntimeError("Mission is not initialized")
        outcome = execute_batch(
            parse_batch(letters), self.rover, self.terrain, self.factory, self.telemetry
        )
        for result in outcome.results:
            if result.ok:
                self.output_fn(result.message)
            else:
                self.report_error(result.message)
        if self.config.mission.show_map:
            self.output_fn(render_ascii(self.terrain, self.rover))
        return outcome

    def report_error(self, message: str) -> None:
        self.output_fn(f"Mission Control Error: {message}")
        self.telemetry.log_event("error", f"Command error: {message}")

    def handle_line(self, line: str) -> bool:
        """Process one validated command line; returns False once the mission ends."""
        if line == "Q":
            self.telemetry.log_event("info", "Mission terminated")
            self.output_fn("Mission Control: Exiting...")
            return False
        if line == "B":
            line = self.ask("Enter batch commands (e.g., MMRMLM): ", self._parse_batch_line)
        elif "Q" in line:
            raise UnknownCommandError(line)
        self.run_batch(line)
        return True

    def run(self) -> None:
        """Run the interactive loop until Q or end of input."""
        self.output_fn("=== Mars Rover Mission Control ===")
        try:
            if self.rover is None or self.terrain is None:
                self.initialize()
        except EOFError:
            self.output_fn("Mission Control: Exiting...")
            return

        self.running = True
        while self.running:
            self.output_fn("")
            for line in HELP_LINES:
                self.output_fn(line)
            try:
                line = self.ask("Enter command or batch: ", self._parse_command_line)
                self.running = self.handle_line(line)
            except EOFError:
                self.telemetry.log_event("info", "Mission terminated (end of input)")
                self.output_fn("Mission Control: Exiting...")
                self.running = False
            except (RoverSimError, ValueError) as exc:
                self.report_error(str(exc))
