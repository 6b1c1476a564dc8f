"""termanim - terminal session animations as loop-safe CSS keyframes."""

__version__ = "0.1.0"

from termanim.composer import Composer
from termanim.document import Document, build_document, build_export_variant
from termanim.errors import (
    ConfigurationError,
    DegenerateTimingError,
    InvalidStepError,
    TermanimError,
)
from termanim.timeline import compile_timeline

__all__ = [
    "Composer",
    "ConfigurationError",
    "DegenerateTimingError",
    "Document",
    "InvalidStepError",
    "TermanimError",
    "build_document",
    "build_export_variant",
    "compile_timeline",
]
