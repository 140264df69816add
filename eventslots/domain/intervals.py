"""
Slot merging and raw overlap queries used for display.
"""

from dataclasses import replace
from typing import List, Sequence

from .models import LabeledInterval, TimeSlot


def merge_slots(slots: Sequence[TimeSlot]) -> List[TimeSlot]:
    """
    Collapse runs of adjacent slots that share the same availability.

    Slots are merged only when one ends exactly where the next starts.
    The merged slot keeps the index of the first slot in its run.

    Example: [08:00-08:15 free, 08:15-08:30 free, 08:30-08:45 busy]
          -> [08:00-08:30 free, 08:30-08:45 busy]
    """
    if not slots:
        return []

    merged: List[TimeSlot] = [slots[0]]

    for current in slots[1:]:
        last = merged[-1]

        if last.end == current.start and last.available == current.available:
            merged[-1] = replace(last, end=current.end)
        else:
            merged.append(current)

    return merged


def find_conflicts(
    candidate: LabeledInterval,
    existing: Sequence[LabeledInterval],
) -> List[LabeledInterval]:
    """
    Return the existing intervals that overlap ``candidate``.

    This is a raw overlap query for highlighting: no buffer, setup or
    breakdown padding is applied.
    """
    target = candidate.as_interval()
    return [item for item in existing if target.overlaps(item.as_interval())]
