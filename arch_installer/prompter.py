from __future__ import annotations

import getpass
import logging
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from .errors import InstallAborted, PromptExhausted

logger = logging.getLogger(__name__)

Option = Tuple[str, str]  # (value, label)

_YES = {"y", "yes"}
_NO = {"n", "no"}


class Prompter(Protocol):
    """Everything a step may ask the operator.

    Every prompt carries a stable key so answers can be scripted.
    """

    def ask(self, key: str, message: str, default: Optional[str] = None) -> str:
        ...

    def secret(self, key: str, message: str) -> str:
        ...

    def confirm(self, key: str, message: str, default: bool = False) -> bool:
        ...

    def choose(self, key: str, message: str, options: Sequence[Option], default: Optional[str] = None) -> str:
        ...

    def show(self, message: str) -> None:
        ...


class _BasePrompter:
    """Shared confirm/choose loops on top of a raw line reader."""

    def _read(self, key: str, message: str) -> str:
        raise NotImplementedError

    def _read_secret(self, key: str, message: str) -> str:
        raise NotImplementedError

    def show(self, message: str) -> None:
        raise NotImplementedError

    def ask(self, key: str, message: str, default: Optional[str] = None) -> str:
        display = f"{message} [{default}]: " if default else f"{message}: "
        value = self._read(key, display).strip()
        return value if value else (default or "")

    def secret(self, key: str, message: str) -> str:
        return self._read_secret(key, f"{message}: ")

    def confirm(self, key: str, message: str, default: bool = False) -> bool:
        suffix = "[Y/n]" if default else "[y/N]"
        while True:
            response = self._read(key, f"{message} {suffix}: ").strip().lower()
            if not response:
                return default
            if response in _YES:
                return True
            if response in _NO:
                return False
            self.show("  Please answer 'y' or 'n'")

    def choose(self, key: str, message: str, options: Sequence[Option], default: Optional[str] = None) -> str:
        """Pick one option by number or by value; invalid input re-prompts."""

        values = [v for v, _ in options]
        while True:
            self.show(message)
            for i, (value, label) in enumerate(options, start=1):
                marker = " [default]" if value == default else ""
                self.show(f"  {i}) {label}{marker}")
            response = self._read(key, "Enter choice: ").strip()
            if not response and default is not None:
                return default
            if response.isdigit() and 1 <= int(response) <= len(options):
                return values[int(response) - 1]
            if response in values:
                return response
            self.show(f"  Invalid choice {response!r}, please try again")


class ConsolePrompter(_BasePrompter):
    def _read(self, key: str, message: str) -> str:
        try:
            return input(message)
        except EOFError:
            print()
            raise InstallAborted("standard input closed") from None

    def _read_secret(self, key: str, message: str) -> str:
        try:
            return getpass.getpass(message)
        except EOFError:
            print()
            raise InstallAborted("standard input closed") from None

    def show(self, message: str) -> None:
        print(message)


class ScriptedPrompter(_BasePrompter):
    """Answers prompts from a mapping of key -> answer (or list of answers, consumed in order).

    Used for unattended installs (config `answers`) and in tests.
    """

    def __init__(self, answers: Mapping[str, Any]) -> None:
        self._answers: Dict[str, List[str]] = {}
        for key, value in answers.items():
            items = value if isinstance(value, list) else [value]
            self._answers[key] = [self._normalize(v) for v in items]
        self.shown: List[str] = []

    @staticmethod
    def _normalize(value: Any) -> str:
        if isinstance(value, bool):
            return "y" if value else "n"
        return "" if value is None else str(value)

    def remaining(self, key: str) -> List[str]:
        return list(self._answers.get(key, []))

    def _read(self, key: str, message: str) -> str:
        queue = self._answers.get(key)
        if not queue:
            raise PromptExhausted(f"No scripted answer left for prompt {key!r} ({message.strip()})")
        value = queue.pop(0)
        logger.debug("Scripted answer for %s", key)
        return value

    def _read_secret(self, key: str, message: str) -> str:
        return self._read(key, message)

    def show(self, message: str) -> None:
        self.shown.append(message)
        logger.debug("PROMPT %s", message)
