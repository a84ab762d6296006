"""Model namespace for discovered call sites and generated wrappers."""

from artifacts.models.call_sites import CallSite
from artifacts.models.wrappers import (
    GenerationResult,
    Manifest,
    ManifestEntry,
    WrapperDescriptor,
)

__all__ = [
    "CallSite",
    "GenerationResult",
    "Manifest",
    "ManifestEntry",
    "WrapperDescriptor",
]
