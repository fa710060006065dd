"""Version history, release resolution and tree diffing for block-based CMS content."""

from content_versions.diff import compute_diff
from content_versions.editions import filter_for_edition
from content_versions.snapshots import capture

__all__ = ["capture", "compute_diff", "filter_for_edition"]
