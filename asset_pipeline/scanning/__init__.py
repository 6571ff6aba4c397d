from .enumerator import (
    EXTENSIONS,
    DirectoryListing,
    FileKind,
    classify,
    count_eligible,
    is_eligible,
    iter_eligible,
    walk,
)

__all__ = [
    "EXTENSIONS",
    "DirectoryListing",
    "FileKind",
    "classify",
    "count_eligible",
    "is_eligible",
    "iter_eligible",
    "walk",
]
