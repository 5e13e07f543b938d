import logging
import os
import re

from ase.data import chemical_symbols

from qchem_g16.utils.constants import bohr_to_angstrom
from qchem_g16.utils.repattern import (
    qchem_rem_block_pattern,
    qchem_section_pattern,
)

logger = logging.getLogger(__name__)


class QChemInputWriter:
    """
    Writes the Q-Chem input for one Gaussian request.

    The $molecule section comes from the request (coordinates converted
    from Bohr to Angstrom); everything else comes from the user's rem text,
    which either holds a complete "$rem ... $end" section (possibly with
    further sections such as $basis) or bare rem keywords that are wrapped
    in one.

    Args:
        request (CalculationRequest): Geometry, charge and multiplicity.
        rem (str): Contents of the user's rem file.
    """

    INPUT_FILENAME = "qchem.in"

    def __init__(self, request, rem):
        self.request = request
        self.rem = rem

    def write(self, target_directory):
        if not os.path.exists(target_directory):
            os.makedirs(target_directory)
        job_inputfile = os.path.join(target_directory, self.INPUT_FILENAME)
        logger.debug(f"Writing Q-Chem input file: {job_inputfile}")
        with open(job_inputfile, "w") as f:
            f.write(self.render())
        logger.info(f"Finished writing Q-Chem input file: {job_inputfile}")
        return job_inputfile

    def render(self):
        return self._molecule_section() + "\n" + self._rem_sections()

    def _molecule_section(self):
        lines = ["$molecule", f"{self.request.charge} {self.request.spin}"]
        for atomic_number, position in zip(
            self.request.atomic_numbers, self.request.coordinates
        ):
            x, y, z = (coord * bohr_to_angstrom for coord in position)
            symbol = self._element_symbol(atomic_number)
            lines.append(f"{symbol:<3s}{x:20.12f}{y:20.12f}{z:20.12f}")
        lines.append("$end")
        return "\n".join(lines) + "\n"

    @staticmethod
    def _element_symbol(atomic_number):
        if not 0 <= atomic_number < len(chemical_symbols):
            raise ValueError(
                f"Invalid atomic number {atomic_number}; expected 0 to "
                f"{len(chemical_symbols) - 1}."
            )
        return chemical_symbols[atomic_number]

    def _rem_sections(self):
        sections = [
            name.lower() for name in re.findall(qchem_section_pattern, self.rem)
        ]
        if "molecule" in sections:
            raise ValueError(
                "The rem file must not contain a $molecule section; "
                "the geometry comes from Gaussian."
            )
        if re.search(qchem_rem_block_pattern, self.rem):
            return self.rem.strip() + "\n"
        logger.debug("No $rem section found, wrapping rem keywords.")
        return "$rem\n" + self.rem.strip() + "\n$end\n"
