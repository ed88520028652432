"""Three-component cell-centred vector field."""

from __future__ import annotations

from typing import Iterable, Optional

import numpy as np

from simplefluid.cell_field_base import CellFieldBase, CellMesh
from simplefluid.vec3 import Vec3

NUM_COMPONENTS = 3


def _check_component(component: int) -> None:
    if not 0 <= component < NUM_COMPONENTS:
        raise IndexError("VectorCellField component index is out of bounds.")


def _as_row(value: Iterable[float]) -> np.ndarray:
    row = np.array(tuple(value), dtype=float)
    if row.shape != (NUM_COMPONENTS,):
        raise ValueError(f"VectorCellField values need {NUM_COMPONENTS} components.")
    return row


class VectorCellField(CellFieldBase):
    """Cell-centred 3D vector field.

    Storage rows are cells and columns are the x, y and z components.
    """

    num_components = NUM_COMPONENTS

    def __init__(
        self,
        mesh: CellMesh,
        name: str = "",
        zero_out: bool = True,
        *,
        initial_value: Optional[Vec3] = None,
    ) -> None:
        if initial_value is not None:
            zero_out = False
        super().__init__(
            mesh, name, zero_out, "VectorCellField", num_components=NUM_COMPONENTS
        )
        if initial_value is not None:
            self.put_scalar(initial_value)

    def put_scalar(self, value: Vec3) -> None:
        """Set every owned and overlap entry to ``value``."""
        row = _as_row(value)
        self._data[:] = row
        self._overlap_data[:] = row

    def value(self, cell_lid: int) -> Vec3:
        return Vec3(*(float(v) for v in self._data[self._owned_row_for_cell(cell_lid)]))

    def owned_value(self, cell_lid: int) -> Vec3:
        return self.value(cell_lid)

    def local_value(self, cell_lid: int) -> Vec3:
        row = self._overlap_data[self._local_row_for_cell(cell_lid)]
        return Vec3(*(float(v) for v in row))

    def component_value(self, cell_lid: int, component: int) -> float:
        _check_component(component)
        return float(self._data[self._owned_row_for_cell(cell_lid), component])

    def local_component_value(self, cell_lid: int, component: int) -> float:
        _check_component(component)
        return float(self._overlap_data[self._local_row_for_cell(cell_lid), component])

    def set_value(self, cell_lid: int, value: Vec3) -> None:
        for component, item in enumerate(_as_row(value)):
            self.set_component_value(cell_lid, component, float(item))

    def set_owned_value(self, cell_lid: int, value: Vec3) -> None:
        """Update only owned storage; call ``sync_ghosts`` before reading overlap data."""
        for component, item in enumerate(_as_row(value)):
            self.set_owned_component_value(cell_lid, component, float(item))

    def set_component_value(self, cell_lid: int, component: int, value: float) -> None:
        _check_component(component)
        self._data[self._owned_row_for_cell(cell_lid), component] = value
        self._overlap_data[self._local_row_for_cell(cell_lid), component] = value

    def set_owned_component_value(
        self, cell_lid: int, component: int, value: float
    ) -> None:
        _check_component(component)
        self._data[self._owned_row_for_cell(cell_lid), component] = value

    def is_owned_cell(self, cell_lid: int) -> bool:
        self._check_cell_lid(cell_lid)
        return bool(self._mesh.is_owned_cell(cell_lid))

    def is_local_cell(self, cell_lid: int) -> bool:
        self._check_cell_lid(cell_lid)
        return self._overlap_map.contains(self._mesh.cell_global_id(cell_lid))