"""Explicit per-record-set field registry: descriptors plus statistics."""

import logging
from typing import Any, Optional

from formlens.models.fields import FieldDescriptor, FieldStatistics

from .classifier import compute_statistics, extract_field_order, fields_of, infer_type, is_blank

logger = logging.getLogger(__name__)


def default_label(name: str) -> str:
    return name[:1].upper() + name[1:]


class FieldRegistry:
    """
    Descriptors for every field discovered in a record set.
    Visible descriptors always carry orders 0..k-1 and hidden ones k..n-1.
    Recompute with from_records whenever the active record set changes.
    """

    def __init__(self, descriptors: list[FieldDescriptor], statistics: Optional[dict[str, FieldStatistics]] = None):
        self._initial = [d.model_copy() for d in descriptors]
        self._descriptors = {d.name: d.model_copy() for d in descriptors}
        self._statistics = dict(statistics or {})
        self._renumber()

    @classmethod
    def from_records(cls, records: list[Any]) -> "FieldRegistry":
        descriptors = []
        statistics = {}
        for index, name in enumerate(extract_field_order(records)):
            usage = sum(1 for r in records if not is_blank(fields_of(r).get(name)))
            descriptors.append(
                FieldDescriptor(
                    name=name,
                    order=index,
                    visible=True,
                    type=infer_type(name, records),
                    usage_count=usage,
                    label=default_label(name),
                )
            )
            statistics[name] = compute_statistics(name, records)
        logger.debug("Field registry built with %d fields from %d records", len(descriptors), len(records))
        return cls(descriptors, statistics)

    @property
    def descriptors(self) -> list[FieldDescriptor]:
        """Descriptors in display order."""
        return sorted(self._descriptors.values(), key=lambda d: d.order)

    def __contains__(self, name: str) -> bool:
        return name in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)

    def get(self, name: str) -> FieldDescriptor:
        if name not in self._descriptors:
            raise KeyError(f"Unknown field: {name}")
        return self._descriptors[name]

    def visible_fields(self) -> list[str]:
        return [d.name for d in self.descriptors if d.visible]

    def statistics(self, name: str) -> FieldStatistics:
        self.get(name)
        return self._statistics.get(name, FieldStatistics())

    def _renumber(self) -> None:
        ordered = sorted(self._descriptors.values(), key=lambda d: (not d.visible, d.order))
        for index, descriptor in enumerate(ordered):
            descriptor.order = index

    def set_visibility(self, name: str, visible: bool) -> None:
        """Show or hide a field. A newly shown field goes last among the visible ones."""
        descriptor = self.get(name)
        if descriptor.visible == visible:
            return
        descriptor.visible = visible
        if visible:
            # Past every hidden order so it sorts after the current visible block
            descriptor.order = len(self._descriptors) + descriptor.order
        self._renumber()

    def move(self, name: str, new_index: int) -> None:
        """Move a visible field to new_index within the visible block (clamped)."""
        descriptor = self.get(name)
        if not descriptor.visible:
            raise ValueError(f"Cannot reorder hidden field: {name}")
        visible = [d for d in self.descriptors if d.visible]
        visible.remove(descriptor)
        new_index = min(max(new_index, 0), len(visible))
        visible.insert(new_index, descriptor)
        for index, d in enumerate(visible):
            d.order = index
        self._renumber()

    def reset(self) -> None:
        """Every field visible, in first-seen order."""
        self._descriptors = {d.name: d.model_copy() for d in self._initial}
        for index, descriptor in enumerate(self._initial):
            self._descriptors[descriptor.name].visible = True
            self._descriptors[descriptor.name].order = index

    def validate(self) -> list[str]:
        """Problems with the current ordering; empty when consistent."""
        problems = []
        descriptors = self.descriptors
        orders = [d.order for d in descriptors]
        if orders != list(range(len(descriptors))):
            problems.append(f"Orders are not contiguous: {orders}")
        k = sum(1 for d in descriptors if d.visible)
        for d in descriptors:
            if d.visible and d.order >= k:
                problems.append(f"Visible field {d.name} has order {d.order} outside 0..{k - 1}")
            elif not d.visible and d.order < k:
                problems.append(f"Hidden field {d.name} has order {d.order} inside the visible block")
        return problems
