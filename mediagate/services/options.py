"""
mediagate/services/options.py

Ordered merging of provider option bags.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Mapping, Optional


def merge_options(*sources: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Shallow-merge option mappings, left to right.

    Precedence: a key in a later source replaces the same key from any
    earlier source, whole (lists such as ``transformation`` are replaced,
    not concatenated). Keys whose value is ``None`` are skipped so an
    unset caller option never erases a default. ``None`` sources are
    ignored.

    Values are deep-copied so callers can mutate the result without
    touching shared defaults.

    >>> merge_options({"quality": "auto", "folder": "a"}, {"folder": "b"})
    {'quality': 'auto', 'folder': 'b'}
    """
    merged: Dict[str, Any] = {}
    for source in sources:
        if not source:
            continue
        for key, value in source.items():
            if value is None:
                continue
            merged[key] = copy.deepcopy(value)
    return merged
