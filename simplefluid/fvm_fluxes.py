"""Finite-volume gradients, face fluxes and flux divergences."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Optional, Protocol, Sequence, Tuple, Union

import numpy as np

from simplefluid.cell_field import CellField
from simplefluid.face_field import FaceField
from simplefluid.vec3 import Vec3
from simplefluid.vector_cell_field import VectorCellField

_PIVOT_TOLERANCE = 1.0e-14


class FvmMesh(Protocol):
    """Connectivity and geometry the finite-volume operators read from a mesh.

    Owned cells come first in local numbering. Face normals point from the
    owner cell towards the neighbour, or outwards on the boundary.
    """

    def num_owned_cells(self) -> int: ...

    def num_local_cells(self) -> int: ...

    def num_faces(self) -> int: ...

    def faces(self, cell_lid: int) -> Sequence[int]: ...

    def cell_centroid(self, cell_lid: int) -> Vec3: ...

    def cell_volume(self, cell_lid: int) -> float: ...

    def owner_cell(self, face_lid: int) -> int: ...

    def neighbor_cell(self, face_lid: int) -> int: ...

    def opposite_cell(self, face_lid: int, cell_lid: int) -> int: ...

    def is_interior_face(self, face_lid: int) -> bool: ...

    def is_boundary_face(self, face_lid: int) -> bool: ...

    def boundary_name(self, face_lid: int) -> str: ...

    def face_area(self, face_lid: int) -> float: ...

    def face_normal(self, face_lid: int) -> Vec3: ...


def solve_3x3(matrix: Sequence[Sequence[float]], rhs: Sequence[float]) -> Vec3:
    """Solve a 3x3 system by Gauss-Jordan elimination with partial pivoting.

    Returns the zero vector when the matrix is singular. The inputs are not
    modified.
    """
    a = np.array(matrix, dtype=float)
    b = np.array(tuple(rhs), dtype=float)
    if a.shape != (3, 3) or b.shape != (3,):
        raise ValueError("solve_3x3 needs a 3x3 matrix and a 3-component right-hand side.")

    for pivot in range(3):
        best = pivot + int(np.argmax(np.abs(a[pivot:, pivot])))
        if abs(a[best, pivot]) < _PIVOT_TOLERANCE:
            return Vec3()

        if best != pivot:
            a[[pivot, best]] = a[[best, pivot]]
            b[[pivot, best]] = b[[best, pivot]]

        inv = 1.0 / a[pivot, pivot]
        a[pivot, pivot:] *= inv
        b[pivot] *= inv

        for row in range(3):
            if row == pivot:
                continue
            factor = a[row, pivot]
            a[row, pivot:] -= factor * a[pivot, pivot:]
            b[row] -= factor * b[pivot]

    return Vec3(*(float(item) for item in b))


def cell_gradient(field: CellField) -> List[Vec3]:
    """Least-squares gradient of a scalar cell field, one per owned cell.

    Only interior-face neighbours contribute; ghost values are read from the
    field's overlap storage.
    """
    mesh = field.mesh
    gradients: List[Vec3] = []
    for cell_lid in range(mesh.num_owned_cells()):
        phi_p = field.value(cell_lid)
        center_p = mesh.cell_centroid(cell_lid)

        normal = np.zeros((3, 3))
        rhs = np.zeros(3)
        for face_lid in mesh.faces(cell_lid):
            if not mesh.is_interior_face(face_lid):
                continue
            other = mesh.opposite_cell(face_lid, cell_lid)
            d = np.array(tuple(mesh.cell_centroid(other) - center_p))
            phi_delta = field.local_value(other) - phi_p
            normal += np.outer(d, d)
            rhs += d * phi_delta

        gradients.append(solve_3x3(normal, rhs))
    return gradients


def cell_divergence(mesh: FvmMesh, flux: FaceField) -> List[float]:
    """Cell divergence of a face flux density field, one per owned cell.

    Faces not owned by the flux field are skipped.
    """
    divergence: List[float] = []
    for cell_lid in range(mesh.num_owned_cells()):
        balance = 0.0
        for face_lid in mesh.faces(cell_lid):
            if not flux.is_owned_face(face_lid):
                continue
            sign = 1.0 if mesh.owner_cell(face_lid) == cell_lid else -1.0
            balance += sign * flux.value(face_lid) * mesh.face_area(face_lid)
        divergence.append(balance / mesh.cell_volume(cell_lid))
    return divergence


@dataclass(frozen=True)
class VelocityBoundaryCache:
    """Fixed velocity per face; ``None`` where no velocity is prescribed."""

    values: Tuple[Optional[Vec3], ...]

    def __len__(self) -> int:
        return len(self.values)

    def value(self, face_lid: int) -> Optional[Vec3]:
        return self.values[face_lid]


def cache_velocity_boundary_conditions(
    mesh: FvmMesh, fixed_velocities: Mapping[str, Vec3]
) -> VelocityBoundaryCache:
    """Look up the prescribed velocity of every boundary face by boundary name.

    ``fixed_velocities`` maps a boundary name to its wall velocity; a no-slip
    wall is given the zero vector.
    """
    values: List[Optional[Vec3]] = []
    for face_lid in range(mesh.num_faces()):
        value: Optional[Vec3] = None
        if mesh.is_boundary_face(face_lid):
            fixed = fixed_velocities.get(mesh.boundary_name(face_lid))
            if fixed is not None:
                value = fixed if isinstance(fixed, Vec3) else Vec3.from_sequence(fixed)
        values.append(value)
    return VelocityBoundaryCache(tuple(values))


BoundaryVelocities = Union[VelocityBoundaryCache, Mapping[str, Vec3], None]


def face_fluxes(
    mesh: FvmMesh,
    velocity: VectorCellField,
    boundary: BoundaryVelocities = None,
) -> List[float]:
    """Owner-oriented integrated flux ``u . n * area`` on every face.

    Interior faces use the arithmetic mean of the two cell velocities.
    Boundary faces carry zero flux unless ``boundary`` prescribes a velocity
    for them, either as a cache or as a mapping of boundary names.
    """
    if velocity.mesh is not mesh:
        raise ValueError("face_fluxes requires a velocity field on the input mesh.")

    cache: Optional[VelocityBoundaryCache]
    if boundary is None or isinstance(boundary, VelocityBoundaryCache):
        cache = boundary
    else:
        cache = cache_velocity_boundary_conditions(mesh, boundary)

    if cache is not None and len(cache) != mesh.num_faces():
        raise ValueError("face_fluxes received the wrong boundary-cache size.")

    fluxes: List[float] = []
    for face_lid in range(mesh.num_faces()):
        if mesh.is_interior_face(face_lid):
            owner_velocity = velocity.local_value(mesh.owner_cell(face_lid))
            neighbor_velocity = velocity.local_value(mesh.neighbor_cell(face_lid))
            face_velocity = (owner_velocity + neighbor_velocity) / 2.0
        elif cache is not None and mesh.is_boundary_face(face_lid):
            fixed = cache.value(face_lid)
            if fixed is None:
                fluxes.append(0.0)
                continue
            face_velocity = fixed
        else:
            fluxes.append(0.0)
            continue

        fluxes.append(face_velocity.dot(mesh.face_normal(face_lid)) * mesh.face_area(face_lid))
    return fluxes


def cell_flux_balance(mesh: FvmMesh, face_fluxes: Sequence[float], cell_lid: int) -> float:
    """Net integrated outflow of one cell from owner-oriented face fluxes."""
    if len(face_fluxes) != mesh.num_faces():
        raise ValueError("cell_flux_balance received the wrong face-flux size.")

    balance = 0.0
    for face_lid in mesh.faces(cell_lid):
        sign = 1.0 if mesh.owner_cell(face_lid) == cell_lid else -1.0
        balance += sign * face_fluxes[face_lid]
    return balance


def cell_divergence_from_fluxes(mesh: FvmMesh, face_fluxes: Sequence[float]) -> List[float]:
    """Cell divergence from owner-oriented integrated fluxes, one per owned cell."""
    return [
        cell_flux_balance(mesh, face_fluxes, cell_lid) / mesh.cell_volume(cell_lid)
        for cell_lid in range(mesh.num_owned_cells())
    ]