"""Project and prompt history store adapters."""

from inkwell_io.storage.filesystem import FileSystemProjectStore
from inkwell_io.storage.history import FileSystemPromptHistoryStore
from inkwell_io.storage.memory import InMemoryProjectStore

__all__ = ["FileSystemProjectStore", "FileSystemPromptHistoryStore", "InMemoryProjectStore"]
