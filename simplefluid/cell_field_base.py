"""Shared storage, index maps and ghost synchronisation for cell fields."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Protocol, Tuple

import numpy as np


class IndexMap:
    """Distribution of global ids onto the local rows of one process.

    Row ``i`` holds the entity with global id ``global_ids[i]``.
    """

    def __init__(self, global_ids: Iterable[int]) -> None:
        ids = tuple(int(gid) for gid in global_ids)
        rows = {gid: row for row, gid in enumerate(ids)}
        if len(rows) != len(ids):
            raise ValueError("IndexMap global ids must be unique.")
        self._gids = ids
        self._rows = rows

    @property
    def global_ids(self) -> Tuple[int, ...]:
        return self._gids

    def __len__(self) -> int:
        return len(self._gids)

    def __iter__(self) -> Iterator[int]:
        return iter(self._gids)

    def __contains__(self, gid: object) -> bool:
        return gid in self._rows

    def __repr__(self) -> str:
        return f"IndexMap({list(self._gids)!r})"

    def local_element(self, gid: int) -> int:
        """Return the local row of ``gid``; raise KeyError if it is not here."""
        try:
            return self._rows[gid]
        except KeyError:
            raise KeyError(f"Global id is not in this map: {gid}") from None

    def global_element(self, lid: int) -> int:
        """Return the global id stored in local row ``lid``."""
        if not 0 <= lid < len(self._gids):
            raise IndexError(f"Local row is out of bounds: {lid}")
        return self._gids[lid]

    def contains(self, gid: int) -> bool:
        return gid in self._rows


class CellMesh(Protocol):
    """What a cell field needs from a mesh."""

    def owned_cell_map(self) -> Optional[IndexMap]: ...

    def overlap_cell_map(self) -> Optional[IndexMap]: ...

    def num_local_cells(self) -> int: ...

    def cell_global_id(self, cell_lid: int) -> int: ...

    def is_owned_cell(self, cell_lid: int) -> bool: ...


def _require_map(mesh: Optional[CellMesh], class_name: str, kind: str) -> IndexMap:
    if mesh is None:
        raise ValueError(f"{class_name} requires a non-null mesh.")
    index_map = mesh.owned_cell_map() if kind == "owned" else mesh.overlap_cell_map()
    if index_map is None:
        raise RuntimeError(
            f"{class_name} requires an assembled mesh with an {kind}-cell map."
        )
    return index_map


class CellFieldBase:
    """Cell-centred storage on owned cells plus an overlap copy for ghosts.

    ``data`` holds one row per owned cell, ``overlap_data`` one row per local
    (owned or ghost) cell. With ``num_components`` the rows are vectors.
    """

    def __init__(
        self,
        mesh: CellMesh,
        name: str = "",
        zero_out: bool = True,
        class_name: str = "CellFieldBase",
        num_components: Optional[int] = None,
    ) -> None:
        owned_map = _require_map(mesh, class_name, "owned")
        overlap_map = _require_map(mesh, class_name, "overlap")

        self._name = name
        self._mesh = mesh
        self._owned_map = owned_map
        self._overlap_map = overlap_map
        self._num_components = num_components

        def shape(index_map: IndexMap) -> Tuple[int, ...]:
            if num_components is None:
                return (len(index_map),)
            return (len(index_map), num_components)

        self._data = np.zeros(shape(owned_map), dtype=float)
        self._overlap_data = np.zeros(shape(overlap_map), dtype=float)

        pairs = [
            (owned_map.local_element(gid), row)
            for row, gid in enumerate(overlap_map)
            if owned_map.contains(gid)
        ]
        self._import_src = np.array([src for src, _ in pairs], dtype=np.intp)
        self._import_dst = np.array([dst for _, dst in pairs], dtype=np.intp)

        self._owned_row_by_cell_lid: List[Optional[int]] = []
        self._local_row_by_cell_lid: List[int] = []
        self._cache_cell_rows(class_name)

        if zero_out:
            self.sync_ghosts()

    def _cache_cell_rows(self, class_name: str) -> None:
        for cell_lid in range(self._mesh.num_local_cells()):
            gid = self._mesh.cell_global_id(cell_lid)
            if not self._overlap_map.contains(gid):
                raise RuntimeError(f"{class_name} overlap map is missing a local cell.")
            self._local_row_by_cell_lid.append(self._overlap_map.local_element(gid))

            owned_row: Optional[int] = None
            if self._mesh.is_owned_cell(cell_lid):
                if not self._owned_map.contains(gid):
                    raise RuntimeError(f"{class_name} owned map is missing an owned cell.")
                owned_row = self._owned_map.local_element(gid)
            self._owned_row_by_cell_lid.append(owned_row)

    @property
    def name(self) -> str:
        return self._name

    def set_name(self, name: str) -> None:
        self._name = name

    @property
    def mesh(self) -> CellMesh:
        return self._mesh

    @property
    def map(self) -> IndexMap:
        return self._owned_map

    @property
    def owned_map(self) -> IndexMap:
        return self._owned_map

    @property
    def overlap_map(self) -> IndexMap:
        return self._overlap_map

    @property
    def data(self) -> np.ndarray:
        return self._data

    @property
    def owned_data(self) -> np.ndarray:
        return self._data

    @property
    def overlap_data(self) -> np.ndarray:
        return self._overlap_data

    def num_owned_cells(self) -> int:
        return len(self._owned_map)

    def num_local_cells(self) -> int:
        return len(self._overlap_map)

    def sync_ghosts(self) -> None:
        """Copy owned values into the overlap storage."""
        self._overlap_data[self._import_dst] = self._data[self._import_src]

    def _check_cell_lid(self, cell_lid: int) -> None:
        if cell_lid < 0:
            raise IndexError(f"Cell local id cannot be negative: {cell_lid}")
        if cell_lid >= self._mesh.num_local_cells():
            raise IndexError(f"Cell local id is out of bounds: {cell_lid}")

    def _owned_row_for_cell(self, cell_lid: int) -> int:
        self._check_cell_lid(cell_lid)
        if not self._mesh.is_owned_cell(cell_lid):
            raise IndexError(f"Cell local id is not owned by this rank: {cell_lid}")
        row = self._owned_row_by_cell_lid[cell_lid]
        if row is None:
            raise RuntimeError(f"Cached owned row is invalid for cell: {cell_lid}")
        return row

    def _owned_row_for_global_cell(self, cell_gid: int) -> int:
        if not self._owned_map.contains(cell_gid):
            raise IndexError(f"Cell global id is not owned by this rank: {cell_gid}")
        return self._owned_map.local_element(cell_gid)

    def _local_row_for_cell(self, cell_lid: int) -> int:
        self._check_cell_lid(cell_lid)
        return self._local_row_by_cell_lid[cell_lid]

    def _local_row_for_global_cell(self, cell_gid: int) -> int:
        if not self._overlap_map.contains(cell_gid):
            raise IndexError(f"Cell global id is not local to this rank: {cell_gid}")
        return self._overlap_map.local_element(cell_gid)