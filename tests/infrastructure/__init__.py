"""
Unified test infrastructure for sgt.

Modules:
- file_utils: Utilities for creating files and directories
- cli_utils: Running the sgt CLI in a subprocess
"""

from .file_utils import write, write_project
from .cli_utils import run_cli, jload

__all__ = [
    "write", "write_project",
    "run_cli", "jload",
]
