"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/sorter.py
Pure sorting logic for duplicate groups — zero dependencies outside core.
Decides which file of a group comes first and is therefore preserved.
"""
from typing import Any, Callable, List, Optional

from hashsweep.core.models import DuplicateGroup, Fingerprint, SortOrder


class Sorter:
    """
    Orders files inside duplicate groups according to a SortOrder.

    Every order except INSERTION ends with the full path as the last tie-breaker,
    so the canonical file never depends on filesystem enumeration order:
    - SHORTEST_PATH: path depth → path length → full path
    - SHORTEST_FILENAME: file name length → full path
    - LEXICAL: full path
    - INSERTION: repository insertion order, unchanged
    """

    @staticmethod
    def key_for(sort_order: SortOrder) -> Optional[Callable[[Fingerprint], Any]]:
        if sort_order == SortOrder.SHORTEST_PATH:
            return lambda f: (f.path_depth, len(f.full_path), f.full_path)
        if sort_order == SortOrder.SHORTEST_FILENAME:
            return lambda f: (len(f.file_name), f.full_path)
        if sort_order == SortOrder.LEXICAL:
            return lambda f: f.full_path
        return None

    @staticmethod
    def sort_files(files: List[Fingerprint], sort_order: Optional[SortOrder] = None) -> List[Fingerprint]:
        """Returns a new, ordered list; the input is left untouched."""
        key_func = Sorter.key_for(sort_order or SortOrder.SHORTEST_PATH)
        if key_func is None:
            return list(files)
        return sorted(files, key=key_func)

    @staticmethod
    def sort_files_inside_groups(groups: List[DuplicateGroup], sort_order: Optional[SortOrder] = None) -> None:
        """Sorts the files of every group in place."""
        if not groups:
            return
        for group in groups:
            group.files = Sorter.sort_files(group.files, sort_order)
