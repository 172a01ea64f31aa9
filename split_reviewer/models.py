"""Data models for markers, proposals, sections and the commit request."""

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class Marker(BaseModel):
    """One split line on the page strip, resting on a snap position."""

    position: float = Field(description="Pixel offset; always one of the snap positions")
    locked: bool = Field(default=False, description="True for the document start/end caps")


class Proposal(BaseModel):
    """Candidate section proposed by the analysis service (1-based, inclusive pages)."""

    start_page: int = Field(ge=1, description="First page of the proposed section")
    end_page: int = Field(description="Last page of the proposed section")
    name: str = Field(default="", description="Display name, may be empty")

    @model_validator(mode="after")
    def _end_not_before_start(self) -> "Proposal":
        if self.end_page < self.start_page:
            raise ValueError(f"end_page {self.end_page} is before start_page {self.start_page}")
        return self


class Section(BaseModel):
    """Contiguous page range derived from two neighbouring markers."""

    start_page: int
    end_page: int
    name: str
    user_named: bool = Field(default=False, description="Name was set by the reviewer; kept verbatim")


class OutputFile(BaseModel):
    """One entry of the analysis service response."""

    start_page: int
    end_page: int | None = None
    is_multipage: bool = False
    path: str = ""
    name: str | None = None


class ProposalResponse(BaseModel):
    """Raw response of the analysis service: one output file per proposed section."""

    output_files: list[OutputFile] = Field(default_factory=list)


class Cut(BaseModel):
    """One section of the final split, in the shape the cut service expects."""

    start_page: int
    end_page: int
    pdf_name: str
    is_modify: bool = True


class FinalPath(BaseModel):
    original_file_path: str
    cuts: list[Cut] = Field(default_factory=list)
    old_file_paths: list[str] = Field(default_factory=list)


class CommitRequest(BaseModel):
    """Payload of the commit ("cut") request."""

    final_paths: list[FinalPath] = Field(default_factory=list)


class RejectReason(str, Enum):
    """Why a drag gesture was ignored."""

    UNKNOWN_MARKER = "unknown_marker"
    INVALID_TARGET_SNAP = "invalid_target_snap"
    UNRESOLVED_MARKER = "unresolved_marker"
    END_CAP = "end_cap"
    OUT_OF_TRACK = "out_of_track"


class DragOutcome(BaseModel):
    """Result of resolving one drag gesture."""

    accepted: bool
    reason: RejectReason | None = None
    target_index: int | None = Field(default=None, description="Snap index the marker was dropped on")
    target_position: float | None = None

    @property
    def rejected(self) -> bool:
        return not self.accepted


class SessionSnapshot(BaseModel):
    """Serializable state of a review session (used by the CLI between invocations)."""

    page_count: int
    state: str
    document_path: str | None = None
    source_paths: list[str] = Field(default_factory=list)
    overlap_tolerance: float = 1.0
    snap_positions: list[float] = Field(default_factory=list)
    markers: list[Marker] = Field(default_factory=list)
    proposals: list[Proposal] = Field(default_factory=list)
    sections: list[Section] = Field(default_factory=list)
    active_snap_index: int | None = None
