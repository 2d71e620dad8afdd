"""inkwell-io: Durable storage adapters for inkwell projects."""

from inkwell_io.storage import FileSystemProjectStore, FileSystemPromptHistoryStore, InMemoryProjectStore

__all__ = ["FileSystemProjectStore", "FileSystemPromptHistoryStore", "InMemoryProjectStore"]
