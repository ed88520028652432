"""Finite-volume building blocks: configuration storage, 3D vectors, cell and
face fields, flux operators, sparse matrix assembly and a GMRES solve."""

__version__ = "0.1.0"
__all__ = [
    "cell_field",
    "cell_field_base",
    "database",
    "face_field",
    "fvm_fluxes",
    "fvm_matrices",
    "linear_solver",
    "random_access_view",
    "vec3",
    "vector_cell_field",
]