"""
Cue Runner Package.

Command resolution and the supervised restart loop.
Requires Python 3.11+.
"""

from runner.command import Command
from runner.process import ChildProcess
from runner.sink import StatusSink, TerminalSink
from runner.supervisor import RunSupervisor, SupervisorState

__all__ = [
    "Command",
    "ChildProcess",
    "StatusSink",
    "TerminalSink",
    "RunSupervisor",
    "SupervisorState",
]
