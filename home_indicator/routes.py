# routes.py
"""Run the external route command and turn its output into a fetch outcome."""

import asyncio
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from home_indicator.config import HOME_COMMAND

SPAWN_ERROR = "spawn"
PROCESS_FAILURE = "process"
UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class Success:
    routes: Tuple[str, ...]


@dataclass(frozen=True)
class Failure:
    """A fetch that produced no routes.

    ``reason`` is the captured stderr for a process failure (verbatim) or
    the OS error text when the command could not be launched.
    """

    reason: str
    kind: str = PROCESS_FAILURE
    command: str = HOME_COMMAND
    returncode: Optional[int] = None

    def describe(self) -> str:
        if self.kind == PROCESS_FAILURE:
            return f"{self.command} failed: {self.reason}"
        return self.reason


FetchOutcome = Union[Success, Failure]


def parse_routes(stdout: str) -> List[str]:
    # Blank output still yields one (empty) entry; the sink treats it as "no data".
    return stdout.rstrip().split("\n")


def _decode(data: Optional[bytes]) -> str:
    return (data or b"").decode("utf-8", errors="replace")


class RouteDataSource:
    def __init__(self, command: str = HOME_COMMAND):
        self.command = command

    async def fetch(self) -> FetchOutcome:
        try:
            proc = await asyncio.create_subprocess_exec(
                self.command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            return Failure(reason=str(e), kind=SPAWN_ERROR, command=self.command)

        # No timeout: a hung command keeps this fetch pending.
        stdout, stderr = await proc.communicate()
        if proc.returncode == 0:
            return Success(tuple(parse_routes(_decode(stdout))))
        return Failure(
            reason=_decode(stderr),
            kind=PROCESS_FAILURE,
            command=self.command,
            returncode=proc.returncode,
        )
