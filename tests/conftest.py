"""Shared fixtures: a scripted stand-in for the adb/fastboot executables."""

from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from droidbridge.adb.client import ADBClient
from droidbridge.adb.device import ADBDevice
from droidbridge.adb.errors import CommandFailedError, ToolNotFoundError
from droidbridge.adb.executor import ExecResult

SERIAL = "emulator-5554"


class FakeRunner:
    """Replays canned responses keyed by tool name and arguments.

    Commands without a scripted response succeed with empty output.
    """

    def __init__(self) -> None:
        self.responses: Dict[Tuple[str, ...], ExecResult] = {}
        self.calls: List[Tuple[str, List[str]]] = []

    def add(self, args: Sequence[str], output="", tool: str = "adb", fail: bool = False) -> None:
        data = output if isinstance(output, bytes) else output.encode("utf-8")
        error = CommandFailedError([tool] + list(args), 1, data.decode("utf-8", errors="replace")) if fail else None
        self.responses[(tool,) + tuple(args)] = ExecResult(data=data, error=error)

    def missing(self, args: Sequence[str], tool: str = "adb") -> None:
        self.responses[(tool,) + tuple(args)] = ExecResult(error=ToolNotFoundError(tool))

    def __call__(self, executable: str, args: Sequence[str]) -> ExecResult:
        tool = Path(executable).name
        self.calls.append((tool, list(args)))
        return self.responses.get((tool,) + tuple(args), ExecResult())

    def called(self, args: Sequence[str], tool: str = "adb") -> bool:
        return (tool, list(args)) in self.calls

    def commands(self, tool: Optional[str] = None) -> List[List[str]]:
        return [args for name, args in self.calls if tool is None or name == tool]


@pytest.fixture
def runner(monkeypatch) -> FakeRunner:
    fake = FakeRunner()
    monkeypatch.setattr("droidbridge.adb.client.run_tool", fake)
    return fake


@pytest.fixture
def client(runner) -> ADBClient:
    return ADBClient(adb_path="adb", fastboot_path="fastboot")


@pytest.fixture
def device(client) -> ADBDevice:
    return ADBDevice(SERIAL, client)
