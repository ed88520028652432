import numpy as np
import pytest

from simplefluid.cell_field_base import CellFieldBase, IndexMap


class FakeMesh:
    def __init__(self, cell_gids, owned, owned_order=None, overlap_gids=None, assembled=True):
        self._gids = list(cell_gids)
        self._owned = list(owned)
        if owned_order is None:
            owned_order = [g for g, o in zip(self._gids, self._owned) if o]
        if overlap_gids is None:
            overlap_gids = self._gids
        self._owned_map = IndexMap(owned_order) if assembled else None
        self._overlap_map = IndexMap(overlap_gids) if assembled else None

    def owned_cell_map(self):
        return self._owned_map

    def overlap_cell_map(self):
        return self._overlap_map

    def num_local_cells(self):
        return len(self._gids)

    def cell_global_id(self, cell_lid):
        return self._gids[cell_lid]

    def is_owned_cell(self, cell_lid):
        return self._owned[cell_lid]


def test_index_map_round_trips():
    index_map = IndexMap([7, 3, 11])
    assert len(index_map) == 3
    for gid in (7, 3, 11):
        assert index_map.contains(gid)
        assert index_map.global_element(index_map.local_element(gid)) == gid
    assert list(index_map) == [7, 3, 11]
    assert not index_map.contains(4)


def test_index_map_errors():
    index_map = IndexMap([1, 2])
    with pytest.raises(KeyError):
        index_map.local_element(5)
    with pytest.raises(IndexError):
        index_map.global_element(2)
    with pytest.raises(ValueError):
        IndexMap([1, 1])


def test_scalar_storage_shapes():
    mesh = FakeMesh([1, 2, 3], [True, True, False])
    field = CellFieldBase(mesh, "phi")
    assert field.num_owned_cells() == 2
    assert field.num_local_cells() == 3
    assert field.data.shape == (2,)
    assert field.overlap_data.shape == (3,)
    assert field.owned_data is field.data
    assert field.map is field.owned_map


def test_component_storage_shapes():
    mesh = FakeMesh([1, 2], [True, True])
    field = CellFieldBase(mesh, "u", num_components=3)
    assert field.data.shape == (2, 3)
    assert field.overlap_data.shape == (2, 3)


def test_sync_ghosts_copies_owned_values_by_global_id():
    mesh = FakeMesh([1, 2], [True, True], owned_order=[2, 1])
    field = CellFieldBase(mesh)
    field.data[:] = [5.0, 6.0]
    field.sync_ghosts()
    # overlap rows follow the overlap map, owned rows the owned map
    for gid in (1, 2):
        assert (
            field.overlap_data[field.overlap_map.local_element(gid)]
            == field.data[field.owned_map.local_element(gid)]
        )


def test_sync_ghosts_leaves_unowned_rows():
    mesh = FakeMesh([1, 2], [True, False])
    field = CellFieldBase(mesh)
    field.overlap_data[1] = 9.0
    field.data[0] = 4.0
    field.sync_ghosts()
    assert np.array_equal(field.overlap_data, [4.0, 9.0])


def test_name_can_change():
    field = CellFieldBase(FakeMesh([1], [True]), "old")
    field.set_name("new")
    assert field.name == "new"


def test_requires_mesh():
    with pytest.raises(ValueError, match="MyField requires a non-null mesh."):
        CellFieldBase(None, class_name="MyField")


def test_requires_assembled_mesh():
    mesh = FakeMesh([1], [True], assembled=False)
    with pytest.raises(RuntimeError, match="owned-cell map"):
        CellFieldBase(mesh)


def test_overlap_map_must_cover_local_cells():
    mesh = FakeMesh([1, 2], [True, True], overlap_gids=[1])
    with pytest.raises(RuntimeError, match="overlap map is missing a local cell"):
        CellFieldBase(mesh)


def test_owned_map_must_cover_owned_cells():
    mesh = FakeMesh([1, 2], [True, True], owned_order=[1])
    with pytest.raises(RuntimeError, match="owned map is missing an owned cell"):
        CellFieldBase(mesh)