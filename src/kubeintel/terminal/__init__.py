"""Terminal window launching for interactive kubectl sessions."""

from .launcher import (
    LINUX_TERMINALS,
    LaunchAttempt,
    LaunchState,
    LinuxTerminalLauncher,
    MacTerminalLauncher,
    TerminalLauncher,
    WindowsTerminalLauncher,
    get_terminal_launcher,
    spawn_console,
    spawn_detached,
)

__all__ = [
    "LINUX_TERMINALS",
    "LaunchAttempt",
    "LaunchState",
    "LinuxTerminalLauncher",
    "MacTerminalLauncher",
    "TerminalLauncher",
    "WindowsTerminalLauncher",
    "get_terminal_launcher",
    "spawn_console",
    "spawn_detached",
]
