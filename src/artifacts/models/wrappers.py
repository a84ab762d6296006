"""Generated scheduler wrapper and manifest models."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, RootModel


class WrapperDescriptor(BaseModel):
    """A planned scheduler module for one unique call site."""

    model_config = ConfigDict(frozen=True)

    function_name: str
    wrapper_name: str
    container_dir: str
    module_path: Path
    import_path: str
    imported_name: str | None = None


class ManifestEntry(BaseModel):
    """Schema for one manifest.json value."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    wrapper_name: str = Field(alias="wrapperName")
    container_dir: str = Field(alias="containerDir")


class Manifest(RootModel[dict[str, ManifestEntry]]):
    """manifest.json: original function name -> wrapper identity."""

    @classmethod
    def from_descriptors(cls, descriptors: list[WrapperDescriptor]) -> Manifest:
        return cls(
            {
                d.function_name: ManifestEntry(
                    wrapper_name=d.wrapper_name,
                    container_dir=d.container_dir,
                )
                for d in descriptors
            }
        )


class GenerationResult(BaseModel):
    """Outcome of one generation pass."""

    container: Path
    files_written: list[Path] = Field(default_factory=list)
    name_map: dict[str, str] = Field(default_factory=dict)


__all__ = ["GenerationResult", "Manifest", "ManifestEntry", "WrapperDescriptor"]
