"""Drift detection between a model snapshot and its live document type."""

from typing import Dict, Iterable, List, Optional

from .coercion import TypeCoercion
from .types import FieldDescriptor, ModelSnapshotProperty, SchemaDiff


class TypeDiffEngine:
    """Classifies the differences between snapshot properties and live fields."""

    def __init__(self, type_coercion: Optional[TypeCoercion] = None):
        self.type_coercion = type_coercion or TypeCoercion()

    def diff(
        self,
        snapshot_properties: Iterable[ModelSnapshotProperty],
        live_fields: Iterable[FieldDescriptor],
    ) -> SchemaDiff:
        """Produce additions, lossless updates and lossy removals.

        Args:
            snapshot_properties: Properties recorded by the last sync
            live_fields: Fields the document type declares now

        Returns:
            Classified changes; removals are unique by property name
        """
        snapshot_properties = list(snapshot_properties)
        live_fields = list(live_fields)

        existing: Dict[str, ModelSnapshotProperty] = {}
        for prop in snapshot_properties:
            existing.setdefault(prop.name, prop)

        result = SchemaDiff()
        removed: Dict[str, ModelSnapshotProperty] = {}

        for live_field in live_fields:
            prop = existing.get(live_field.name)

            if prop is None:
                result.add.append(live_field)
                continue

            if prop.type == live_field.type:
                continue

            if self.type_coercion.can_convert(prop.type, live_field.type):
                result.update.append(live_field)
                continue

            # Lossy retype: drop the old data and re-add under the new type
            removed.setdefault(prop.name, prop)
            result.add.append(live_field)

        live_names = {live_field.name for live_field in live_fields}
        for prop in snapshot_properties:
            if prop.name not in live_names:
                removed.setdefault(prop.name, prop)

        result.remove = list(removed.values())
        return result

    def changed_names(self, diff: SchemaDiff) -> List[str]:
        """Names touched by a diff, in classification order."""
        names = [f.name for f in diff.update]
        names.extend(p.name for p in diff.remove)
        names.extend(f.name for f in diff.add if f.name not in names)
        return names
