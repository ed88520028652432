"""Cell-centred scalar field."""

from __future__ import annotations

from typing import Optional

from simplefluid.cell_field_base import CellFieldBase, CellMesh


class CellField(CellFieldBase):
    """Scalar field on the cells of a mesh.

    Owned values live in ``data``; ``overlap_data`` mirrors them for every
    local cell and is refreshed by ``sync_ghosts``.
    """

    def __init__(
        self,
        mesh: CellMesh,
        name: str = "",
        zero_out: bool = True,
        *,
        initial_value: Optional[float] = None,
    ) -> None:
        if initial_value is not None:
            zero_out = False
        super().__init__(mesh, name, zero_out, "CellField")
        if initial_value is not None:
            self.put_scalar(initial_value)

    @property
    def vector(self):
        return self._data

    def put_scalar(self, value: float) -> None:
        """Set every owned and overlap entry to ``value``."""
        self._data.fill(value)
        self._overlap_data.fill(value)

    def value(self, cell_lid: int) -> float:
        return float(self._data[self._owned_row_for_cell(cell_lid)])

    def owned_value(self, cell_lid: int) -> float:
        return self.value(cell_lid)

    def local_value(self, cell_lid: int) -> float:
        return float(self._overlap_data[self._local_row_for_cell(cell_lid)])

    def global_value(self, cell_gid: int) -> float:
        return float(self._data[self._owned_row_for_global_cell(cell_gid)])

    def set_value(self, cell_lid: int, value: float) -> None:
        self._data[self._owned_row_for_cell(cell_lid)] = value
        self._overlap_data[self._local_row_for_cell(cell_lid)] = value

    def set_owned_value(self, cell_lid: int, value: float) -> None:
        """Update only owned storage; call ``sync_ghosts`` before reading overlap data."""
        self._data[self._owned_row_for_cell(cell_lid)] = value

    def set_global_value(self, cell_gid: int, value: float) -> None:
        self._data[self._owned_row_for_global_cell(cell_gid)] = value
        self._overlap_data[self._local_row_for_global_cell(cell_gid)] = value

    def sum_into_value(self, cell_lid: int, value: float) -> None:
        self._data[self._owned_row_for_cell(cell_lid)] += value
        self._overlap_data[self._local_row_for_cell(cell_lid)] += value

    def sum_into_global_value(self, cell_gid: int, value: float) -> None:
        self._data[self._owned_row_for_global_cell(cell_gid)] += value
        self._overlap_data[self._local_row_for_global_cell(cell_gid)] += value

    def is_owned_cell(self, cell_lid: int) -> bool:
        self._check_cell_lid(cell_lid)
        return bool(self._mesh.is_owned_cell(cell_lid))

    def is_local_cell(self, cell_lid: int) -> bool:
        self._check_cell_lid(cell_lid)
        return self.is_local_global_cell(self._mesh.cell_global_id(cell_lid))

    def is_owned_global_cell(self, cell_gid: int) -> bool:
        return self._owned_map.contains(cell_gid)

    def is_local_global_cell(self, cell_gid: int) -> bool:
        return self._overlap_map.contains(cell_gid)