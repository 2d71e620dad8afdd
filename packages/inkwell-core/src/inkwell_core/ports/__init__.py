"""Port interfaces consumed by the inkwell core."""

from inkwell_core.ports.llm import GenerationServiceProtocol
from inkwell_core.ports.storage import (
    ProjectStoreProtocol,
    PromptHistoryStoreProtocol,
    StoreError,
    StoreErrorCode,
    StoreErrorDetails,
    StoreErrorInfo,
)

__all__ = [
    "GenerationServiceProtocol",
    "ProjectStoreProtocol",
    "PromptHistoryStoreProtocol",
    "StoreError",
    "StoreErrorCode",
    "StoreErrorDetails",
    "StoreErrorInfo",
]
