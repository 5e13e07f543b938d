"""
Hessian reordering between Q-Chem and Gaussian conventions.

Q-Chem's hessian.dat stores the upper triangle (diagonal included) of the
Cartesian Hessian, row by row, with the three axes of each atom adjacent.
Gaussian reads back the lower triangle, row by row, in coordinate-major
order. Both use the global coordinate index 3*atom + axis.
"""

import logging

import numpy as np

from qchem_g16.utils.constants import HESSIAN_CONVERSION_FACTOR
from qchem_g16.utils.utils import HessianAssemblyError

logger = logging.getLogger(__name__)


def num_triangle_values(n: int) -> int:
    """Entries in one triangle, diagonal included, of an n x n matrix."""
    return n * (n + 1) // 2


def symmetric_matrix_from_upper_triangle(values, n: int) -> np.ndarray:
    """
    Build the full symmetric matrix from its upper triangle.

    Parameters
    ----------
    values : sequence of float
        Upper triangle in row order: row i from 0 to n-1, column j from
        i to n-1.
    n : int
        Matrix dimension.

    Returns
    -------
    np.ndarray
        Array of shape (n, n) with M[i, j] == M[j, i].

    Raises
    ------
    HessianAssemblyError
        If `values` does not hold exactly n*(n+1)/2 entries, i.e. some
        (row, col) pair would stay unassigned.
    """
    values = np.asarray(values, dtype=float)
    expected = num_triangle_values(n)
    if values.ndim != 1 or values.size != expected:
        raise HessianAssemblyError(
            f"Cannot assemble a {n}x{n} symmetric matrix from "
            f"{values.size} values; {expected} are required."
        )

    matrix = np.zeros((n, n))
    rows, cols = np.triu_indices(n)
    matrix[rows, cols] = values
    matrix[cols, rows] = values
    return matrix


def lower_triangle_coordinate_major(
    matrix: np.ndarray, atom_count: int
) -> np.ndarray:
    """
    Flatten a Cartesian Hessian into Gaussian's lower-triangular order.

    Loops atom i, axis ix, atom j, axis jx and keeps M[left, right] with
    left = 3*i + ix and right = 3*j + jx whenever left >= right.

    Parameters
    ----------
    matrix : np.ndarray
        Symmetric array of shape (3*atom_count, 3*atom_count).
    atom_count : int
        Number of atoms.

    Returns
    -------
    np.ndarray
        The 3N*(3N+1)/2 selected entries, in emission order.
    """
    n = 3 * atom_count
    if matrix.shape != (n, n):
        raise HessianAssemblyError(
            f"Hessian of shape {matrix.shape} does not match "
            f"{atom_count} atoms."
        )

    selected = []
    for i in range(atom_count):
        for ix in range(3):
            left = 3 * i + ix
            for j in range(atom_count):
                for jx in range(3):
                    right = 3 * j + jx
                    if left >= right:
                        selected.append(matrix[left, right])
    return np.array(selected)


def reindex_hessian(values, atom_count: int) -> np.ndarray:
    """
    Convert Q-Chem hessian.dat values into Gaussian force constants.

    Parameters
    ----------
    values : sequence of float
        Upper-triangular, atom-major Hessian as read from hessian.dat.
    atom_count : int
        Number of atoms; the Hessian dimension is 3*atom_count.

    Returns
    -------
    np.ndarray
        Lower-triangular, coordinate-major entries scaled by
        HESSIAN_CONVERSION_FACTOR.
    """
    n = 3 * atom_count
    logger.debug(
        f"Reindexing {n}x{n} Hessian ({num_triangle_values(n)} values)."
    )
    matrix = symmetric_matrix_from_upper_triangle(values, n)
    return lower_triangle_coordinate_major(matrix, atom_count) * (
        HESSIAN_CONVERSION_FACTOR
    )
