from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest
from pytest import MonkeyPatch

from arch_installer.config import InstallerConfig
from arch_installer.context import InstallContext
from arch_installer.lib import command
from arch_installer.lib.mounts import MountManager
from arch_installer.prompter import ScriptedPrompter

Responder = Callable[[List[str]], Optional[subprocess.CompletedProcess]]


@dataclass
class FakeSubprocess:
    """Records every argv passed to subprocess.run and answers with canned results."""

    calls: List[List[str]] = field(default_factory=list)
    inputs: List[Optional[str]] = field(default_factory=list)
    responders: List[Responder] = field(default_factory=list)

    def respond(self, responder: Responder) -> None:
        self.responders.append(responder)

    def fail_on(self, *prefix: str, returncode: int = 1, stderr: str = "boom") -> None:
        def _r(argv: List[str]) -> Optional[subprocess.CompletedProcess]:
            if argv[: len(prefix)] == list(prefix):
                return subprocess.CompletedProcess(argv, returncode, "", stderr)
            return None

        self.respond(_r)

    def stdout_for(self, *prefix: str, stdout: str) -> None:
        def _r(argv: List[str]) -> Optional[subprocess.CompletedProcess]:
            if argv[: len(prefix)] == list(prefix):
                return subprocess.CompletedProcess(argv, 0, stdout, "")
            return None

        self.respond(_r)

    def __call__(self, argv, **kwargs: Any) -> subprocess.CompletedProcess:
        argv = list(argv)
        self.calls.append(argv)
        self.inputs.append(kwargs.get("input"))
        for responder in reversed(self.responders):
            result = responder(argv)
            if result is not None:
                return result
        return subprocess.CompletedProcess(argv, 0, "", "")

    def commands(self, name: str) -> List[List[str]]:
        return [c for c in self.calls if c and c[0] == name]


@pytest.fixture
def fake_run(monkeypatch: MonkeyPatch) -> FakeSubprocess:
    fake = FakeSubprocess()
    monkeypatch.setattr(command.subprocess, "run", fake)
    return fake


@pytest.fixture
def target_root(tmp_path: Path) -> Path:
    root = tmp_path / "target"
    root.mkdir()
    return root


@pytest.fixture
def make_ctx(target_root: Path) -> Callable[..., InstallContext]:
    def _make(answers: Optional[Dict[str, Any]] = None, config: Optional[Dict[str, Any]] = None) -> InstallContext:
        return InstallContext(
            config=InstallerConfig(raw=config or {}),
            prompter=ScriptedPrompter(answers or {}),
            mounts=MountManager(),
            target_root=str(target_root),
        )

    return _make
