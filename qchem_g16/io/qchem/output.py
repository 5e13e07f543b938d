import logging
from functools import cached_property

from qchem_g16.utils.mixins import FileMixin
from qchem_g16.utils.repattern import qm_energy_line_prefix
from qchem_g16.utils.utils import (
    MissingEnergyLineError,
    ParseError,
    parse_numbers_from_string,
)

logger = logging.getLogger(__name__)


class QChemOutput(FileMixin):
    """
    Q-Chem output file (qchem.out).

    Args:
        filename (str): Path to the Q-Chem output file.
    """

    def __init__(self, filename):
        self.filename = filename

    @cached_property
    def energy_lines(self):
        """All lines carrying the QM energy, in file order."""
        return [
            line
            for line in self.raw_contents
            if line.startswith(qm_energy_line_prefix)
        ]

    @cached_property
    def energy(self):
        """
        QM energy in Hartree.

        Taken from the first line starting with " The QM part of the
        energy is"; any later such line is ignored.

        Raises:
            MissingEnergyLineError: If no line carries the energy.
            ParseError: If the value after the label is not a float.
        """
        if not self.energy_lines:
            raise MissingEnergyLineError(
                f"No line starting with {qm_energy_line_prefix.strip()!r} in "
                f"Q-Chem output file {self.filepath}."
            )
        if len(self.energy_lines) > 1:
            logger.debug(
                f"{len(self.energy_lines)} energy lines found in "
                f"{self.filepath}; using the first one."
            )
        value = self.energy_lines[0][len(qm_energy_line_prefix) :].strip()
        try:
            energy = float(value)
        except ValueError as e:
            raise ParseError(
                f"Failed to parse energy {value!r} in {self.filepath}."
            ) from e
        logger.debug(f"QM energy: {energy}")
        return energy


class QChemDataFile(FileMixin):
    """
    Whitespace-separated numeric data Q-Chem writes next to its output,
    such as efield.dat and hessian.dat.
    """

    def __init__(self, filename):
        self.filename = filename

    def read_values(self, num_values):
        """
        Read exactly `num_values` floats from the file.

        Raises:
            ParseError: If a token is not a float.
            CountMismatchError: If the file holds a different count.
        """
        logger.debug(f"Reading {num_values} values from {self.filepath}")
        return parse_numbers_from_string(num_values, self.content_lines_string)
