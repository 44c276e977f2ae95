"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - File IO accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, LocalFileStore satisfies it
      without inheriting from anything
"""

from typing import Protocol


class AudioFileStore(Protocol):
    """Contract for audio blob storage — implemented by infrastructure/file_storage."""
    def save(self, file_name: str, data: bytes) -> str: ...
    def delete(self, file_name: str) -> bool: ...
    def locate(self, file_name: str) -> str | None: ...
