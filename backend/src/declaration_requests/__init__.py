"""Declaration request lifecycle and batch document generation"""

from .service import RequestLifecycleService
from .generation import (
    DocumentGenerationService,
    GenerationOutcome,
    GenerationReport,
    ItemOutcome,
)

__all__ = [
    "RequestLifecycleService",
    "DocumentGenerationService",
    "GenerationOutcome",
    "GenerationReport",
    "ItemOutcome",
]
