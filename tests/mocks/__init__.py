"""Test mocks for cocinero-core.

Provides recording fakes for the host collaborators:
- FakeFileSystem: In-memory files with a write log
- FakeProcessRunner: Scripted process results with a command log
- FakePackageManager / FakeServiceControl: Hook collaborators
"""

from .fakes import (
    FakeFileSystem,
    FakePackageManager,
    FakeProcessRunner,
    FakeServiceControl,
    failed_command,
)

__all__ = [
    "FakeFileSystem",
    "FakePackageManager",
    "FakeProcessRunner",
    "FakeServiceControl",
    "failed_command",
]
