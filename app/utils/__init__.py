"""유틸리티 모듈."""

from .validation import (
    validate_required_fields,
    validate_filename,
    validate_file_size,
    validate_image_extension,
    validate_file_signature,
    validate_image_count,
    validate_image_upload,
    validate_requirements,
)

__all__ = [
    "validate_required_fields",
    "validate_filename",
    "validate_file_size",
    "validate_image_extension",
    "validate_file_signature",
    "validate_image_count",
    "validate_image_upload",
    "validate_requirements",
]
