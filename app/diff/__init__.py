"""Diff engine: blob resolution, line diffing, classification, comment anchors."""

from .blob_resolver import Blob, BlobResolver
from .comment_anchors import LineKey, attach_comments, line_key_to_str, orphaned_comments
from .file_classifier import ChangedPath, classify
from .line_differ import diff, split_lines, trailing_newline_changed

__all__ = [
    "Blob",
    "BlobResolver",
    "ChangedPath",
    "LineKey",
    "attach_comments",
    "classify",
    "diff",
    "line_key_to_str",
    "orphaned_comments",
    "split_lines",
    "trailing_newline_changed",
]
