"""Data models for the proposal wizard."""

from .common import CamelModel
from .requirements import Requirements, REQUIRED_FIELDS, find_missing_fields
from .proposal import (
    SectionStatus,
    Section,
    ImageStatus,
    ImageItem,
    Proposal,
    ApprovalProgress,
    ProcessResponse,
)
from .error import ErrorResponse

__all__ = [
    "CamelModel",
    # Requirement models
    "Requirements",
    "REQUIRED_FIELDS",
    "find_missing_fields",
    # Proposal models
    "SectionStatus",
    "Section",
    "ImageStatus",
    "ImageItem",
    "Proposal",
    "ApprovalProgress",
    "ProcessResponse",
    # Error models
    "ErrorResponse",
]
