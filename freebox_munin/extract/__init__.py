"""Field extraction submodule – anchor / unit / occurrence lookups."""

from freebox_munin.extract.fields import (
    FieldSpec,
    extract,
    extract_region,
    extract_text,
)

__all__ = [
    "FieldSpec",
    "extract",
    "extract_region",
    "extract_text",
]
