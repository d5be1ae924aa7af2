"""Unified data models for bucket search."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PackageRecord(BaseModel):
    """Unified package representation for all bucket formats."""

    name: str = Field(
        default="", description="Manifest file name without extension, or table row name"
    )
    version: str = Field(default="", description="Package version")
    description: str = Field(default="", description="Package description")
    homepage: str = Field(default="", description="Project homepage URL")
    binaries: list[str] = Field(
        default_factory=list, description="Executables (and aliases) shipped by the package"
    )


# bucket identity (path, archive or url) -> records
BucketCollection = dict[str, list[PackageRecord]]


class SourceCondition(str, Enum):
    """When a source is consulted."""

    ALWAYS = ""
    IF_ZERO = "if0"


class SourceKind(str, Enum):
    """Explicit source kinds accepted in a source descriptor."""

    BUCKET = "bucket"
    BUCKETS = "buckets"
    REDIRECT = "redirect"
    HTML = "html"


class SourceDescriptor(BaseModel):
    """A configured origin from which buckets are loaded."""

    model_config = ConfigDict(frozen=True)

    condition: SourceCondition = Field(
        default=SourceCondition.ALWAYS, description="Fallback condition"
    )
    kind: Optional[SourceKind] = Field(
        default=None, description="Explicit kind; inferred from the path when missing"
    )
    path: str = Field(description="File path or URL")

    def __str__(self) -> str:
        parts = []
        if self.condition is SourceCondition.IF_ZERO:
            parts.append(f"{self.condition.value}:")
        if self.kind is not None:
            parts.append(f"[{self.kind.value}]")
        parts.append(self.path)
        return " ".join(parts)


class SourceMatch(BaseModel):
    """Filtered result of one processed source."""

    source: Optional[SourceDescriptor] = Field(default=None, description="Source searched")
    buckets: BucketCollection = Field(
        default_factory=dict, description="Buckets holding at least one match"
    )
    num_records: int = Field(default=0, description="Total matched records")
    num_buckets_loaded: int = Field(default=0, description="Buckets loaded before filtering")
    error: Optional[str] = Field(default=None, description="Why the source was unavailable")
