"""Execution context passed to components that spawn processes."""

import os
import sys
from dataclasses import dataclass, field
from typing import Dict, TextIO


@dataclass
class ExecutionContext:
    """Working directory, environment and output stream for one invocation.

    Components receive this explicitly instead of reading ``os.getcwd()`` or
    ``os.environ`` themselves, so tests can hand them a temporary directory and
    a controlled environment.
    """

    cwd: str
    env: Dict[str, str] = field(default_factory=dict)
    stream: TextIO = field(default=sys.stdout)

    @classmethod
    def from_process(cls) -> "ExecutionContext":
        """Build a context from the current process state."""
        return cls(cwd=os.getcwd(), env=dict(os.environ), stream=sys.stdout)
