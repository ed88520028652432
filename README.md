# simplefluid

Finite-volume building blocks for small transient Boussinesq
natural-convection simulations: typed configuration storage, 3D vectors,
cell- and face-centred fields with ghost storage, flux and gradient
operators, sparse matrix assembly with SciPy, and a GMRES linear solve.

## Modules

- `simplefluid.database` — `Database`, a key-value store whose values are
  tagged with a `ValueKind` (`INT`, `REAL`, `STRING`, `BOOL`, `VEC_INT`,
  `VEC_REAL`, `VEC_STRING`). The kind is inferred by `set`; `get(key, kind)`
  raises `KeyError` when the key is missing or holds a value of another kind.
  Unsupported values (and empty lists, whose kind cannot be inferred) raise
  `TypeError`. `DBNode` is the single-kind store it is built on.
- `simplefluid.vec3` — `Vec3`, an immutable 3D vector with `+`, `-`, scalar
  `*` and `/`, `dot`, `cross`, `norm`, `component` and `from_sequence`; and
  `Dimension`, the `X`/`Y`/`Z` axis index.
- `simplefluid.random_access_view` — `RandomAccessView`, a fixed-length,
  writable window onto `data[start:start + size]`; writes and `sort()` change
  the underlying list.
- `simplefluid.cell_field_base` — `IndexMap` (global ids to local rows) and
  `CellFieldBase`, which keeps owned storage (`data`) and overlap storage
  (`overlap_data`) and copies owned values into the overlap with
  `sync_ghosts()`. The `CellMesh` protocol lists what a mesh must provide.
- `simplefluid.cell_field` — `CellField`, a scalar cell field with local-id
  and global-id reads, writes and sums.
- `simplefluid.vector_cell_field` — `VectorCellField`, a 3-component cell
  field returning `Vec3` values, with per-component access.
- `simplefluid.face_field` — `FaceField`, a scalar field on the faces whose
  owner cell is owned; owned faces get global ids `0, 1, 2, ...`.
- `simplefluid.fvm_fluxes` — `solve_3x3`, least-squares `cell_gradient`,
  `cell_divergence`, `face_fluxes` (interior faces use the mean of the two
  cell velocities; boundary faces carry zero flux unless a fixed velocity is
  given by a `VelocityBoundaryCache` or a mapping of boundary names),
  `cache_velocity_boundary_conditions`, `cell_flux_balance` and
  `cell_divergence_from_fluxes`. The `FvmMesh` protocol lists the mesh
  queries they use.
- `simplefluid.fvm_matrices` — SciPy CSR matrices: `identity_matrix`,
  `diffusion_matrix`, `upwind_convection_matrix`, `pressure_poisson_matrix`
  (with a gauge row) and `transport_system`, which returns a
  `TransportSystem` holding the matrix and right-hand side of a semi-implicit
  mass + upwind convection + diffusion step.
- `simplefluid.linear_solver` — `solve_linear_system` runs restarted GMRES
  with the settings in `LinearSolverOptions` (`max_iterations`, `tolerance`)
  and raises `ConvergenceError` (carrying the last iterate in `.solution`)
  when it does not converge.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Examples

Configuration and vectors:

```python
from simplefluid.database import Database, ValueKind
from simplefluid.vec3 import Vec3

db = Database()
db.set("dimension", 3)
db.set("mesh_size", 0.25)
db.set("X", [0.0, 0.5, 1.0])

assert db.get("dimension", ValueKind.INT) == 3
assert db.get("X", ValueKind.VEC_REAL) == [0.0, 0.5, 1.0]

a = Vec3(1.0, 0.0, 0.0)
b = Vec3(0.0, 1.0, 0.0)
assert a.cross(b) == Vec3(0.0, 0.0, 1.0)
assert Vec3(3.0, 4.0, 0.0).norm() == 5.0
```

A cell field on any object that provides the `CellMesh` methods:

```python
from simplefluid.cell_field import CellField
from simplefluid.cell_field_base import IndexMap


class TwoCells:
    def owned_cell_map(self):
        return IndexMap([1, 2])

    def overlap_cell_map(self):
        return IndexMap([1, 2])

    def num_local_cells(self):
        return 2

    def cell_global_id(self, cell_lid):
        return cell_lid + 1

    def is_owned_cell(self, cell_lid):
        return True


temperature = CellField(TwoCells(), "temperature")
temperature.set_value(0, 2.5)
temperature.sum_into_global_value(1, 0.5)
assert temperature.value(0) == 3.0
```

Solving a small linear system:

```python
import numpy as np
from simplefluid.cell_field_base import IndexMap
from simplefluid.fvm_matrices import identity_matrix
from simplefluid.linear_solver import LinearSolverOptions, solve_linear_system

matrix = identity_matrix(IndexMap([0, 1, 2]), 1.0)
rhs = np.array([1.0, 2.0, 3.0])
solution = solve_linear_system(matrix, rhs, np.zeros(3), LinearSolverOptions(tolerance=1e-14))
assert np.allclose(matrix @ solution, rhs)
```

## What the package does not do

- It has no mesh classes and builds no meshes: fields and operators work on
  any object that provides the methods in the `CellMesh`, `FaceMesh`,
  `FvmMesh` and `MatrixMesh` protocols.
- It has no time-stepping driver that runs a whole simulation, and writes no
  result files (no VTU or other output).
- It runs in a single process: `sync_ghosts()` copies between local arrays,
  and there is no distributed communication.
- It has no command-line program.