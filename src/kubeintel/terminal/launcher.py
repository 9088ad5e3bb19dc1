"""Open a command line in a new terminal window on the host OS.

Each launch is a one-shot, fire-and-forget spawn: the launcher never waits
on the terminal process and keeps no state between launches. The outcome of
a launch is described by the returned ``LaunchAttempt``.
"""

from __future__ import annotations

import shlex
import shutil
import subprocess
import sys
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum

from loguru import logger

from kubeintel.infra.k8s.commands import TerminalCommand
from kubeintel.infra.k8s.errors import NoTerminalFoundError, ProcessSpawnError

Spawner = Callable[[Sequence[str]], None]
ConsoleSpawner = Callable[[str], None]
Which = Callable[[str], str | None]

PRESS_ENTER_PROMPT = "Press Enter to exit..."


class LaunchState(StrEnum):
    NOT_STARTED = "not_started"
    PROBING = "probing"
    LAUNCHED = "launched"
    FAILED = "failed"


_TRANSITIONS: dict[LaunchState, frozenset[LaunchState]] = {
    LaunchState.NOT_STARTED: frozenset({LaunchState.PROBING}),
    LaunchState.PROBING: frozenset({LaunchState.LAUNCHED, LaunchState.FAILED}),
    LaunchState.LAUNCHED: frozenset(),
    LaunchState.FAILED: frozenset(),
}


@dataclass
class LaunchAttempt:
    """Record of a single launch."""

    command: TerminalCommand
    state: LaunchState = LaunchState.NOT_STARTED
    terminal: str | None = None
    tried: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    def advance(self, state: LaunchState) -> None:
        if state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Invalid launch transition {self.state} -> {state}")
        self.state = state

    @property
    def launched(self) -> bool:
        return self.state is LaunchState.LAUNCHED


def spawn_detached(argv: Sequence[str]) -> None:
    """Start ``argv`` in a new session without waiting on it.

    Raises:
        OSError: If the executable cannot be started
    """
    subprocess.Popen(
        list(argv),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        close_fds=True,
        start_new_session=True,
    )


def spawn_console(command_line: str) -> None:
    """Start ``command_line`` in a new console window without waiting on it.

    The string reaches CreateProcess unchanged, so cmd.exe sees exactly the
    escaping it was built with. The window owns its own standard streams.

    Raises:
        OSError: If the executable cannot be started
    """
    subprocess.Popen(command_line, creationflags=subprocess.CREATE_NEW_CONSOLE)


class TerminalLauncher(ABC):
    """Spawns a visible terminal running a command line."""

    name: str = "terminal"

    def __init__(self, spawn: Spawner = spawn_detached) -> None:
        self._spawn = spawn

    @abstractmethod
    def launch(self, command: TerminalCommand) -> LaunchAttempt:
        """Open a terminal running ``command``.

        Returns:
            The attempt, in state LAUNCHED

        Raises:
            NoTerminalFoundError: If no terminal could be started
            ProcessSpawnError: If the platform's terminal failed to start
        """
        ...

    def _launch_single(
        self, command: TerminalCommand, terminal: str, argv: Sequence[str] | str
    ) -> LaunchAttempt:
        attempt = LaunchAttempt(command=command)
        attempt.advance(LaunchState.PROBING)
        attempt.tried.append(terminal)
        try:
            self._spawn(argv)
        except OSError as e:
            attempt.errors[terminal] = str(e)
            attempt.advance(LaunchState.FAILED)
            raise ProcessSpawnError(
                f"Failed to start {terminal}", details=str(e)
            ) from e
        attempt.terminal = terminal
        attempt.advance(LaunchState.LAUNCHED)
        logger.info(f"Launched {terminal}: {command.command_line}")
        return attempt


class WindowsTerminalLauncher(TerminalLauncher):
    """New ``cmd`` console kept open with ``/K``.

    The command line arrives already escaped for cmd.exe, so the only
    unescaped operator cmd.exe sees is the ``&&`` joining echo and command.
    """

    name = "cmd"

    def __init__(self, spawn: ConsoleSpawner = spawn_console) -> None:
        self._spawn = spawn  # type: ignore[assignment]

    def command_line(self, command: TerminalCommand) -> str:
        line = command.command_line
        return f"cmd /K echo {line} && {line}"

    def launch(self, command: TerminalCommand) -> LaunchAttempt:
        return self._launch_single(command, self.name, self.command_line(command))


class MacTerminalLauncher(TerminalLauncher):
    """Terminal.app driven through ``osascript``."""

    name = "Terminal.app"

    def argv(self, command: TerminalCommand) -> list[str]:
        script = _applescript_string(command.command_line)
        return [
            "osascript",
            "-e",
            f'tell application "Terminal" to do script {script}',
            "-e",
            'tell application "Terminal" to activate',
        ]

    def launch(self, command: TerminalCommand) -> LaunchAttempt:
        return self._launch_single(command, self.name, self.argv(command))


# Terminal emulators probed in order, with the argv prefix that makes each
# run a bash script and stay open.
LINUX_TERMINALS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("gnome-terminal", ("--",)),
    ("konsole", ("--noclose", "-e")),
    ("xfce4-terminal", ("--hold", "-x")),
    ("xterm", ("-e",)),
    ("terminator", ("-x",)),
    ("alacritty", ("-e",)),
)


class LinuxTerminalLauncher(TerminalLauncher):
    """Probe installed terminal emulators and spawn the first that works."""

    name = "linux"

    def __init__(
        self,
        spawn: Spawner = spawn_detached,
        which: Which = shutil.which,
        candidates: Sequence[tuple[str, Sequence[str]]] = LINUX_TERMINALS,
    ) -> None:
        super().__init__(spawn)
        self._which = which
        self.candidates = tuple(candidates)

    @staticmethod
    def script(command: TerminalCommand) -> str:
        line = command.command_line
        return (
            f"echo {shlex.quote(line)}; {line}; "
            f'read -r -p "{PRESS_ENTER_PROMPT}" _'
        )

    def argv(self, terminal: str, prefix: Sequence[str], command: TerminalCommand) -> list[str]:
        return [terminal, *prefix, "bash", "-c", self.script(command)]

    def launch(self, command: TerminalCommand) -> LaunchAttempt:
        attempt = LaunchAttempt(command=command)
        attempt.advance(LaunchState.PROBING)

        for terminal, prefix in self.candidates:
            if self._which(terminal) is None:
                logger.debug(f"Terminal {terminal} not installed")
                continue
            attempt.tried.append(terminal)
            try:
                self._spawn(self.argv(terminal, prefix, command))
            except OSError as e:
                logger.debug(f"Terminal {terminal} failed to start: {e}")
                attempt.errors[terminal] = str(e)
                continue
            attempt.terminal = terminal
            attempt.advance(LaunchState.LAUNCHED)
            logger.info(f"Launched {terminal}: {command.command_line}")
            return attempt

        attempt.advance(LaunchState.FAILED)
        tried = ", ".join(attempt.tried) or "none installed"
        raise NoTerminalFoundError(
            "No supported terminal emulator could be started",
            details=f"Tried: {tried}",
            attempt=attempt,
        )


def get_terminal_launcher(platform: str = sys.platform) -> TerminalLauncher:
    """Return the launcher for a ``sys.platform`` value."""
    if platform.startswith("win"):
        return WindowsTerminalLauncher()
    if platform == "darwin":
        return MacTerminalLauncher()
    return LinuxTerminalLauncher()


def _applescript_string(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
