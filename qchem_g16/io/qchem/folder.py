import logging
import os

import numpy as np

from qchem_g16.io.qchem.output import QChemDataFile, QChemOutput

logger = logging.getLogger(__name__)


class QChemRunFolder:
    """
    Run directory a Q-Chem calculation leaves its results in.

    Args:
        folder (str): Path to the run directory.
    """

    OUTPUT_FILENAME = "qchem.out"
    GRADIENT_FILENAME = "efield.dat"
    HESSIAN_FILENAME = "hessian.dat"

    def __init__(self, folder="."):
        self.folder = folder

    def __repr__(self):
        return f"{self.__class__.__name__}(folder={self.folder!r})"

    @property
    def output_file(self):
        return os.path.join(self.folder, self.OUTPUT_FILENAME)

    @property
    def gradient_file(self):
        return os.path.join(self.folder, self.GRADIENT_FILENAME)

    @property
    def hessian_file(self):
        return os.path.join(self.folder, self.HESSIAN_FILENAME)

    @property
    def output(self):
        return QChemOutput(self.output_file)

    def energy(self):
        """QM energy from qchem.out."""
        return self.output.energy

    def gradient(self, atom_count):
        """
        Gradient from efield.dat as an (atom_count, 3) array.

        Rows follow the atom order of the request, exactly as stored.
        """
        values = QChemDataFile(self.gradient_file).read_values(3 * atom_count)
        return np.array(values).reshape(atom_count, 3)

    def hessian_upper_triangle(self, atom_count):
        """Flat upper-triangular Hessian from hessian.dat."""
        n = 3 * atom_count
        values = QChemDataFile(self.hessian_file).read_values(n * (n + 1) // 2)
        return np.array(values)
