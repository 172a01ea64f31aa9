"""
Proposal sources: where the initial section boundaries come from.

    from split_reviewer.proposals import get_source

    source = get_source("service", base_url="http://localhost:5000")
    response = source.fetch(Path("bundle.pdf"))
"""

from typing import Any

from split_reviewer.proposals.base import ProposalSource
from split_reviewer.proposals.file import JsonFileSource
from split_reviewer.proposals.llm import LLMProposalSource
from split_reviewer.proposals.service import AnalysisServiceSource

__all__ = [
    "ProposalSource",
    "AnalysisServiceSource",
    "JsonFileSource",
    "LLMProposalSource",
    "get_source",
]

REGISTRY: dict[str, type] = {
    "service": AnalysisServiceSource,
    "file": JsonFileSource,
    "llm": LLMProposalSource,
}


def get_source(name: str, **kwargs: Any) -> ProposalSource:
    """Instantiate the proposal source registered under name. Raises KeyError if unknown."""
    if name not in REGISTRY:
        raise KeyError(f"Unknown proposal source: {name}. Available: {list(REGISTRY)}")
    return REGISTRY[name](**kwargs)
