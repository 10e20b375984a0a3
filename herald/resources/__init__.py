"""Resource copying with token filtering."""

from .copier import ResourcesCopier, copy_resources, filter_values
from .filtering import (
    DEFAULT_NON_FILTERED_EXTENSIONS,
    filter_text,
    load_properties,
    parse_properties,
    path_matches,
)

__all__ = [
    "ResourcesCopier",
    "copy_resources",
    "filter_values",
    "DEFAULT_NON_FILTERED_EXTENSIONS",
    "filter_text",
    "load_properties",
    "parse_properties",
    "path_matches",
]
