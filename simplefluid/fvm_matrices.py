"""Finite-volume matrix assembly: identity, diffusion, upwind convection,
scalar transport and pressure Poisson operators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Protocol, Sequence, Tuple

import numpy as np
from scipy import sparse

from simplefluid.cell_field_base import IndexMap
from simplefluid.fvm_fluxes import FvmMesh

BoundaryValueProvider = Callable[[int, float], Optional[float]]
_Row = Tuple[int, List[int], List[float]]


class MatrixMesh(FvmMesh, Protocol):
    """Mesh queries needed to assemble cell-based matrices."""

    def owned_cell_map(self) -> Optional[IndexMap]: ...

    def cell_global_id(self, cell_lid: int) -> int: ...

    def face_cell_center_distance(self, face_lid: int) -> float: ...

    def cell_to_face_distance(self, face_lid: int, cell_lid: int) -> float: ...


def _owned_map(mesh: MatrixMesh) -> IndexMap:
    index_map = mesh.owned_cell_map()
    if index_map is None:
        raise RuntimeError("Matrix assembly requires an assembled mesh with an owned-cell map.")
    return index_map


def _assemble(index_map: IndexMap, rows: Iterable[_Row]) -> sparse.csr_matrix:
    """Build a square sparse matrix from rows given by global ids.

    Repeated entries in a row are summed.
    """
    size = len(index_map)
    row_idx: List[int] = []
    col_idx: List[int] = []
    values: List[float] = []
    for row_gid, cols, vals in rows:
        row = index_map.local_element(row_gid)
        for col_gid, val in zip(cols, vals):
            if not index_map.contains(col_gid):
                raise ValueError(f"Matrix column global id is not in the row map: {col_gid}")
            row_idx.append(row)
            col_idx.append(index_map.local_element(col_gid))
            values.append(val)
    return sparse.csr_matrix(
        (np.array(values, dtype=float), (np.array(row_idx, dtype=np.intp), np.array(col_idx, dtype=np.intp))),
        shape=(size, size),
    )


def _out_flux(mesh: MatrixMesh, face_fluxes: Sequence[float], face_lid: int, cell_lid: int) -> float:
    flux = face_fluxes[face_lid]
    return flux if mesh.owner_cell(face_lid) == cell_lid else -flux


def _check_flux_size(mesh: MatrixMesh, face_fluxes: Sequence[float], caller: str) -> None:
    if len(face_fluxes) != mesh.num_faces():
        raise ValueError(f"{caller} received the wrong face-flux size.")


def identity_matrix(index_map: IndexMap, diagonal: float = 1.0) -> sparse.csr_matrix:
    """Diagonal matrix over ``index_map`` with ``diagonal`` on every row."""
    return sparse.identity(len(index_map), dtype=float, format="csr") * diagonal


def diffusion_matrix(mesh: MatrixMesh, diffusivity: float) -> sparse.csr_matrix:
    """Two-point-flux diffusion matrix with a constant diffusivity.

    Only interior faces contribute. Raises RuntimeError for coincident cells.
    """
    rows: List[_Row] = []
    for cell_lid in range(mesh.num_owned_cells()):
        cols: List[int] = []
        vals: List[float] = []
        diagonal = 0.0
        for face_lid in mesh.faces(cell_lid):
            if not mesh.is_interior_face(face_lid):
                continue
            other = mesh.opposite_cell(face_lid, cell_lid)
            distance = mesh.face_cell_center_distance(face_lid)
            if distance <= 0.0:
                raise RuntimeError("Cannot assemble diffusion across coincident cells.")
            coeff = diffusivity * mesh.face_area(face_lid) / distance
            diagonal += coeff
            cols.append(mesh.cell_global_id(other))
            vals.append(-coeff)
        row_gid = mesh.cell_global_id(cell_lid)
        cols.append(row_gid)
        vals.append(diagonal)
        rows.append((row_gid, cols, vals))
    return _assemble(_owned_map(mesh), rows)


def upwind_convection_matrix(mesh: MatrixMesh, face_fluxes: Sequence[float]) -> sparse.csr_matrix:
    """Integrated first-order upwind convection operator.

    Outflow goes on the diagonal; inflow through interior faces couples to
    the upwind neighbour. Inflow through boundary faces is left out.
    """
    _check_flux_size(mesh, face_fluxes, "upwind_convection_matrix")

    rows: List[_Row] = []
    for cell_lid in range(mesh.num_owned_cells()):
        cols: List[int] = []
        vals: List[float] = []
        diagonal = 0.0
        for face_lid in mesh.faces(cell_lid):
            out_flux = _out_flux(mesh, face_fluxes, face_lid, cell_lid)
            if out_flux >= 0.0:
                diagonal += out_flux
            elif mesh.is_interior_face(face_lid):
                other = mesh.opposite_cell(face_lid, cell_lid)
                cols.append(mesh.cell_global_id(other))
                vals.append(out_flux)
        row_gid = mesh.cell_global_id(cell_lid)
        cols.append(row_gid)
        vals.append(diagonal)
        rows.append((row_gid, cols, vals))
    return _assemble(_owned_map(mesh), rows)


@dataclass
class TransportSystem:
    """Matrix and right-hand side of a semi-implicit scalar transport update."""

    matrix: sparse.csr_matrix
    rhs: np.ndarray


def transport_system(
    mesh: MatrixMesh,
    old_values: Sequence[float],
    face_fluxes: Sequence[float],
    time_step: float,
    diffusivity: float,
    boundary_value: BoundaryValueProvider,
) -> TransportSystem:
    """Assemble mass, upwind convection and diffusion into one system.

    ``boundary_value(face_lid, fallback)`` returns the fixed value on a
    boundary face, or None for a zero-gradient face; inflow through such a
    face then carries the cell's old value.
    """
    if time_step <= 0.0:
        raise ValueError("transport_system requires a positive time step.")
    if diffusivity < 0.0:
        raise ValueError("transport_system requires non-negative diffusivity.")
    if len(old_values) < mesh.num_local_cells():
        raise ValueError("transport_system old-value cache is too small.")
    _check_flux_size(mesh, face_fluxes, "transport_system")

    index_map = _owned_map(mesh)
    rhs = np.zeros(len(index_map), dtype=float)
    rows: List[_Row] = []

    for cell_lid in range(mesh.num_owned_cells()):
        row_gid = mesh.cell_global_id(cell_lid)
        cols: List[int] = []
        vals: List[float] = []
        diagonal = mesh.cell_volume(cell_lid) / time_step
        old_value = float(old_values[cell_lid])
        rhs_value = diagonal * old_value

        for face_lid in mesh.faces(cell_lid):
            cached: List[Optional[float]] = []

            def face_boundary_value() -> Optional[float]:
                if not cached:
                    cached.append(boundary_value(face_lid, old_value))
                return cached[0]

            interior = mesh.is_interior_face(face_lid)
            out_flux = _out_flux(mesh, face_fluxes, face_lid, cell_lid)
            if out_flux >= 0.0:
                diagonal += out_flux
            elif interior:
                other = mesh.opposite_cell(face_lid, cell_lid)
                cols.append(mesh.cell_global_id(other))
                vals.append(out_flux)
            else:
                value = face_boundary_value()
                rhs_value -= out_flux * (old_value if value is None else value)

            if diffusivity <= 0.0:
                continue

            if interior:
                distance = mesh.face_cell_center_distance(face_lid)
                if distance <= 0.0:
                    raise RuntimeError("Cannot assemble diffusion across coincident cells.")
                coeff = diffusivity * mesh.face_area(face_lid) / distance
                other = mesh.opposite_cell(face_lid, cell_lid)
                diagonal += coeff
                cols.append(mesh.cell_global_id(other))
                vals.append(-coeff)
            else:
                distance = mesh.cell_to_face_distance(face_lid, cell_lid)
                value = face_boundary_value()
                if distance > 0.0 and value is not None:
                    coeff = diffusivity * mesh.face_area(face_lid) / distance
                    diagonal += coeff
                    rhs_value += coeff * value

        cols.append(row_gid)
        vals.append(diagonal)
        rows.append((row_gid, cols, vals))
        rhs[index_map.local_element(row_gid)] = rhs_value

    return TransportSystem(_assemble(index_map, rows), rhs)


def pressure_poisson_matrix(mesh: MatrixMesh, gauge_cell_gid: int) -> sparse.csr_matrix:
    """Pressure Poisson matrix with the row of ``gauge_cell_gid`` fixed to identity.

    Cells with no interior faces get a unit diagonal.
    """
    rows: List[_Row] = []
    for cell_lid in range(mesh.num_owned_cells()):
        row_gid = mesh.cell_global_id(cell_lid)
        if row_gid == gauge_cell_gid:
            rows.append((row_gid, [row_gid], [1.0]))
            continue

        cols: List[int] = []
        vals: List[float] = []
        diagonal = 0.0
        for face_lid in mesh.faces(cell_lid):
            if not mesh.is_interior_face(face_lid):
                continue
            distance = mesh.face_cell_center_distance(face_lid)
            if distance <= 0.0:
                raise RuntimeError(
                    "Cannot assemble pressure Poisson matrix across coincident cells."
                )
            coeff = mesh.face_area(face_lid) / distance
            other = mesh.opposite_cell(face_lid, cell_lid)
            diagonal += coeff
            cols.append(mesh.cell_global_id(other))
            vals.append(-coeff)

        cols.append(row_gid)
        vals.append(diagonal if diagonal > 0.0 else 1.0)
        rows.append((row_gid, cols, vals))
    return _assemble(_owned_map(mesh), rows)