"""Changes to merge requests noticed between refreshes."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class MrChangeType(enum.Enum):
    """What kind of change happened to a merge request."""

    PIPELINE_FAILED = "pipeline_failed"
    PIPELINE_SUCCEEDED = "pipeline_succeeded"
    NEW_DISCUSSIONS = "new_discussions"
    APPROVED = "approved"


@dataclass
class MrChange:
    """A single change to a merge request in a project."""

    project_name: str
    mr_iid: int
    mr_title: str
    change_type: MrChangeType
    discussion_count: int = 0

    def action(self) -> str:
        """Short description of the change."""
        if self.change_type is MrChangeType.PIPELINE_FAILED:
            return "Pipeline failed"
        if self.change_type is MrChangeType.PIPELINE_SUCCEEDED:
            return "Pipeline succeeded"
        if self.change_type is MrChangeType.NEW_DISCUSSIONS:
            if self.discussion_count == 1:
                return "1 new discussion"
            return f"{self.discussion_count} new discussions"
        return "Approved"

    def __str__(self) -> str:
        return f"{self.project_name} !{self.mr_iid}: {self.action()}"