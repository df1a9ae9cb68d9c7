from typing import List

from hashsweep.core.models import DuplicateGroup, Fingerprint


class DuplicateService:
    @staticmethod
    def files_to_process(groups: List[DuplicateGroup]) -> List[Fingerprint]:
        """
        Returns every non-canonical file, i.e. what a resolver would delete or move.
        The first file of each group is always preserved.
        """
        result = []
        for group in groups:
            if len(group.files) > 1:
                result.extend(group.duplicates)
        return result

    @staticmethod
    def calculate_space_savings(groups: List[DuplicateGroup]) -> int:
        """Total bytes freed if every non-canonical file were removed."""
        return sum(group.wasted_bytes for group in groups)

    @staticmethod
    def duplicate_members(groups: List[DuplicateGroup]) -> List[Fingerprint]:
        """All files that belong to a duplicate group, canonical ones included."""
        return [fingerprint for group in groups for fingerprint in group.files]
