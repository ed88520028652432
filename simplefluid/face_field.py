"""Face-centred scalar field on faces whose owner cell is locally owned."""

from __future__ import annotations

from typing import List, Optional, Protocol, Tuple

import numpy as np

from simplefluid.cell_field_base import IndexMap


class FaceMesh(Protocol):
    """What a face field needs from a mesh."""

    def owned_cell_map(self) -> Optional[IndexMap]: ...

    def num_faces(self) -> int: ...

    def owner_cell(self, face_lid: int) -> int: ...

    def is_owned_cell(self, cell_lid: int) -> bool: ...


class FaceField:
    """Scalar field on the mesh faces owned by this process.

    A face is owned when its owner cell is owned by the mesh. Owned faces
    receive contiguous global ids starting at zero.
    """

    def __init__(
        self,
        mesh: FaceMesh,
        name: str = "",
        zero_out: bool = True,
        *,
        initial_value: Optional[float] = None,
    ) -> None:
        if mesh is None:
            raise ValueError("FaceField requires a non-null mesh.")
        if mesh.owned_cell_map() is None:
            raise RuntimeError("FaceField requires an assembled mesh with an owned-cell map.")

        owned_face_ids: List[int] = []
        face_lid_to_owned_row: List[Optional[int]] = []
        for face_lid in range(mesh.num_faces()):
            if mesh.is_owned_cell(mesh.owner_cell(face_lid)):
                face_lid_to_owned_row.append(len(owned_face_ids))
                owned_face_ids.append(face_lid)
            else:
                face_lid_to_owned_row.append(None)

        self._name = name
        self._mesh = mesh
        self._owned_face_ids: Tuple[int, ...] = tuple(owned_face_ids)
        self._face_lid_to_owned_row = face_lid_to_owned_row
        self._map = IndexMap(range(len(owned_face_ids)))
        self._data = np.zeros(len(owned_face_ids), dtype=float)
        if initial_value is not None:
            self.put_scalar(initial_value)

    @property
    def name(self) -> str:
        return self._name

    def set_name(self, name: str) -> None:
        self._name = name

    @property
    def mesh(self) -> FaceMesh:
        return self._mesh

    @property
    def map(self) -> IndexMap:
        return self._map

    @property
    def data(self) -> np.ndarray:
        return self._data

    @property
    def vector(self) -> np.ndarray:
        return self._data

    @property
    def owned_face_ids(self) -> Tuple[int, ...]:
        return self._owned_face_ids

    def num_owned_faces(self) -> int:
        return len(self._owned_face_ids)

    def put_scalar(self, value: float) -> None:
        self._data.fill(value)

    def _check_face_lid(self, face_lid: int) -> None:
        if face_lid < 0:
            raise IndexError(f"Face local id cannot be negative: {face_lid}")
        if face_lid >= len(self._face_lid_to_owned_row):
            raise IndexError(f"Face local id is out of bounds: {face_lid}")

    def _owned_row_for_face(self, face_lid: int) -> int:
        self._check_face_lid(face_lid)
        row = self._face_lid_to_owned_row[face_lid]
        if row is None:
            raise IndexError(f"Face local id is not owned by this rank: {face_lid}")
        return row

    def _owned_row_for_global_face(self, face_gid: int) -> int:
        if not self._map.contains(face_gid):
            raise IndexError(f"Face global id is not owned by this rank: {face_gid}")
        return self._map.local_element(face_gid)

    def face_global_id(self, face_lid: int) -> int:
        return self._map.global_element(self._owned_row_for_face(face_lid))

    def value(self, face_lid: int) -> float:
        return float(self._data[self._owned_row_for_face(face_lid)])

    def global_value(self, face_gid: int) -> float:
        return float(self._data[self._owned_row_for_global_face(face_gid)])

    def set_value(self, face_lid: int, value: float) -> None:
        self._data[self._owned_row_for_face(face_lid)] = value

    def set_global_value(self, face_gid: int, value: float) -> None:
        self._data[self._owned_row_for_global_face(face_gid)] = value

    def sum_into_value(self, face_lid: int, value: float) -> None:
        self._data[self._owned_row_for_face(face_lid)] += value

    def sum_into_global_value(self, face_gid: int, value: float) -> None:
        self._data[self._owned_row_for_global_face(face_gid)] += value

    def is_owned_face(self, face_lid: int) -> bool:
        self._check_face_lid(face_lid)
        return self._face_lid_to_owned_row[face_lid] is not None

    def is_owned_global_face(self, face_gid: int) -> bool:
        return self._map.contains(face_gid)