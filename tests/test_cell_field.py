import pytest

from simplefluid.cell_field import CellField
from simplefluid.cell_field_base import IndexMap


class FakeMesh:
    def __init__(self, cell_gids, owned, owned_order=None, assembled=True):
        self._gids = list(cell_gids)
        self._owned = list(owned)
        if owned_order is None:
            owned_order = [g for g, o in zip(self._gids, self._owned) if o]
        self._owned_map = IndexMap(owned_order) if assembled else None
        self._overlap_map = IndexMap(self._gids) if assembled else None

    def owned_cell_map(self):
        return self._owned_map

    def overlap_cell_map(self):
        return self._overlap_map

    def num_local_cells(self):
        return len(self._gids)

    def num_owned_cells(self):
        return sum(self._owned)

    def cell_global_id(self, cell_lid):
        return self._gids[cell_lid]

    def is_owned_cell(self, cell_lid):
        return self._owned[cell_lid]


def make_two_hex_mesh():
    return FakeMesh([1, 2], [True, True])


def make_ghosted_mesh():
    return FakeMesh([10, 20, 30], [True, True, False])


def test_stores_values_on_owned_cell_map():
    mesh = make_two_hex_mesh()
    temperature = CellField(mesh, "temperature")

    assert temperature.name == "temperature"
    assert temperature.mesh is mesh
    assert temperature.num_owned_cells() == 2
    assert len(temperature.map) == mesh.num_owned_cells()
    assert temperature.value(0) == 0.0
    assert temperature.value(1) == 0.0

    temperature.set_value(0, 2.5)
    temperature.set_global_value(2, 4.0)
    temperature.sum_into_value(0, 0.5)
    temperature.sum_into_global_value(2, 1.0)

    assert temperature.value(0) == pytest.approx(3.0)
    assert temperature.global_value(1) == pytest.approx(3.0)
    assert temperature.value(1) == pytest.approx(5.0)
    assert temperature.global_value(2) == pytest.approx(5.0)
    assert temperature.is_owned_cell(0)
    assert temperature.is_owned_global_cell(2)
    assert not temperature.is_owned_global_cell(77)


def test_initial_value_constructor_fills_vector():
    mesh = make_two_hex_mesh()
    pressure = CellField(mesh, "pressure", initial_value=101325.0)

    assert pressure.name == "pressure"
    assert pressure.value(0) == 101325.0
    assert pressure.value(1) == 101325.0
    assert pressure.local_value(0) == 101325.0
    assert pressure.local_value(1) == 101325.0
    assert len(pressure.overlap_map) == mesh.num_local_cells()


def test_synchronizes_owned_values_into_overlap_storage():
    mesh = make_two_hex_mesh()
    temperature = CellField(mesh, "temperature")
    temperature.set_value(0, 10.0)
    temperature.set_value(1, 20.0)
    temperature.sync_ghosts()

    assert temperature.is_local_cell(0)
    assert temperature.is_local_global_cell(1)
    assert temperature.local_value(0) == 10.0
    assert temperature.local_value(1) == 20.0


def test_requires_assembled_mesh():
    with pytest.raises(RuntimeError):
        CellField(FakeMesh([1], [True], assembled=False))


def test_requires_mesh():
    with pytest.raises(ValueError):
        CellField(None)


@pytest.mark.parametrize("owned_order", [None, [2, 1]])
def test_syncs_owned_global_id_values_to_all_local_cells(owned_order):
    mesh = FakeMesh([1, 2], [True, True], owned_order=owned_order)
    field = CellField(mesh, "global_id_field")
    for cell_lid in range(mesh.num_owned_cells()):
        field.set_owned_value(cell_lid, float(mesh.cell_global_id(cell_lid)))

    field.sync_ghosts()

    for cell_lid in range(mesh.num_local_cells()):
        assert field.local_value(cell_lid) == float(mesh.cell_global_id(cell_lid))


def test_set_owned_value_leaves_overlap_until_sync():
    field = CellField(make_two_hex_mesh())
    field.set_owned_value(0, 3.0)
    assert field.value(0) == 3.0
    assert field.local_value(0) == 0.0
    field.sync_ghosts()
    assert field.local_value(0) == 3.0


def test_ghost_cell_is_local_but_not_owned():
    field = CellField(make_ghosted_mesh())
    assert field.is_local_cell(2)
    assert not field.is_owned_cell(2)
    assert field.is_local_global_cell(30)
    assert not field.is_owned_global_cell(30)
    assert field.local_value(2) == 0.0
    with pytest.raises(IndexError, match="not owned by this rank"):
        field.value(2)
    with pytest.raises(IndexError, match="not owned by this rank"):
        field.global_value(30)


def test_put_scalar_fills_owned_and_ghost_rows():
    field = CellField(make_ghosted_mesh())
    field.put_scalar(1.5)
    assert [field.local_value(lid) for lid in range(3)] == [1.5, 1.5, 1.5]
    assert field.owned_value(1) == 1.5


def test_out_of_range_cell_ids():
    field = CellField(make_two_hex_mesh())
    with pytest.raises(IndexError, match="negative"):
        field.value(-1)
    with pytest.raises(IndexError, match="out of bounds"):
        field.local_value(2)
    with pytest.raises(IndexError):
        field.is_local_cell(5)
    with pytest.raises(IndexError, match="not local to this rank"):
        field.set_global_value(77, 1.0)


def test_vector_is_owned_storage():
    field = CellField(make_two_hex_mesh())
    field.set_value(1, 8.0)
    assert field.vector is field.data
    assert list(field.vector) == [0.0, 8.0]