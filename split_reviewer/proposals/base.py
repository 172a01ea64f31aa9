"""Interface for proposal sources. Implement this to plug in another analysis backend."""

from pathlib import Path
from typing import Protocol, runtime_checkable

from split_reviewer.models import ProposalResponse


@runtime_checkable
class ProposalSource(Protocol):
    """Supplies the initial section proposals for a document."""

    def fetch(self, pdf_path: Path) -> ProposalResponse:
        """
        Return proposed sections for the PDF at pdf_path.

        Raises ProposalSourceError if the source is unreachable or answers garbage.
        """
        ...

    @property
    def name(self) -> str:
        """Source identifier (e.g. 'service')."""
        ...
