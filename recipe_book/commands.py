"""Console command surface.

The host console identifies commands by a ``name|alias`` string.  The recipe
book registers exactly one command whose every alias toggles the panel.
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

CommandAction = Callable[[Sequence[str]], None]


@dataclass(frozen=True)
class ConsoleCommand:
    names: str
    help: str
    action: CommandAction

    @property
    def aliases(self) -> Tuple[str, ...]:
        return tuple(name.strip().lower() for name in self.names.split("|") if name.strip())


class CommandRegistry:
    """Minimal stand-in for the host console's command table."""

    def __init__(self) -> None:
        self._commands: List[ConsoleCommand] = []
        self._by_alias: Dict[str, ConsoleCommand] = {}

    def register(self, command: ConsoleCommand) -> None:
        aliases = command.aliases
        if not aliases:
            raise ValueError("command has no name")
        clashes = [alias for alias in aliases if alias in self._by_alias]
        if clashes:
            raise ValueError(f"command name already registered: {', '.join(clashes)}")
        self._commands.append(command)
        for alias in aliases:
            self._by_alias[alias] = command

    def unregister(self, command: ConsoleCommand) -> None:
        if command not in self._commands:
            return
        self._commands.remove(command)
        for alias in command.aliases:
            if self._by_alias.get(alias) is command:
                del self._by_alias[alias]

    def get(self, name: str) -> Optional[ConsoleCommand]:
        return self._by_alias.get(name.strip().lower())

    def dispatch(self, line: str) -> bool:
        """Run the command named by the first word of ``line``."""

        try:
            words = shlex.split(line)
        except ValueError:
            words = line.split()
        if not words:
            return False
        command = self.get(words[0])
        if command is None:
            logger.debug("Unknown console command '%s'", words[0])
            return False
        command.action(words[1:])
        return True

    @property
    def commands(self) -> Sequence[ConsoleCommand]:
        return tuple(self._commands)


__all__ = ["CommandAction", "CommandRegistry", "ConsoleCommand"]
