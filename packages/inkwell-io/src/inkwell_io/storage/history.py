"""Filesystem-backed prompt history."""

from __future__ import annotations

import asyncio
from pathlib import Path

import orjson
from pydantic import TypeAdapter, ValidationError

from inkwell_core.history import PromptLog
from inkwell_core.ports.storage import (
    PromptHistoryStoreProtocol,
    StoreError,
    StoreErrorCode,
    StoreErrorDetails,
    StoreErrorInfo,
)
from inkwell_io.storage.filesystem import write_json_atomic

_PROMPTS = TypeAdapter(list[PromptLog])


class FileSystemPromptHistoryStore(PromptHistoryStoreProtocol):
    """Prompt history kept in ``<base_dir>/prompt_history.json``."""

    def __init__(self, base_dir: str | Path) -> None:
        """Initialize the history store."""
        self.path = Path(base_dir) / "prompt_history.json"

    async def load_prompts(self) -> list[PromptLog]:
        """Read the stored prompts.

        Returns:
            list[PromptLog]: Stored prompts, newest first; empty if none were saved.

        Raises:
            StoreError: If the document cannot be read or parsed.
        """
        try:
            payload = await asyncio.to_thread(self._read)
        except OSError as exc:
            raise self._error(StoreErrorCode.IO_ERROR, str(exc), "load_prompts") from exc
        if payload is None:
            return []
        try:
            return _PROMPTS.validate_python(orjson.loads(payload))
        except orjson.JSONDecodeError as exc:
            raise self._error(
                StoreErrorCode.SERIALIZATION_ERROR, f"Prompt history is not valid JSON: {exc}", "load_prompts"
            ) from exc
        except ValidationError as exc:
            raise self._error(
                StoreErrorCode.VALIDATION_ERROR, "Prompt history failed schema validation", "load_prompts"
            ) from exc

    async def save_prompts(self, prompts: list[PromptLog]) -> None:
        """Replace the stored prompts.

        Raises:
            StoreError: If the document cannot be written.
        """
        payload = orjson.dumps(_PROMPTS.dump_python(prompts, mode="json"), option=orjson.OPT_INDENT_2)
        try:
            await asyncio.to_thread(write_json_atomic, self.path, payload)
        except OSError as exc:
            raise self._error(StoreErrorCode.IO_ERROR, str(exc), "save_prompts") from exc

    def _read(self) -> bytes | None:
        if not self.path.exists():
            return None
        return self.path.read_bytes()

    def _error(self, code: StoreErrorCode, message: str, operation: str) -> StoreError:
        return StoreError(
            StoreErrorInfo(
                code=code,
                message=message,
                details=StoreErrorDetails(operation=operation, path=str(self.path)),
            )
        )
