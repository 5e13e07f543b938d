"""
Gaussian external-program files.

Gaussian's `External` keyword writes a request file (InputFile, ".EIn")
and expects the results back in a fixed-width file (OutputFile, ".EOu").

Request layout:
    NAtoms, IDeriv, ICharg, IMult                 (4I10)
    per atom: atomic number, X, Y, Z, MM charge   (I10, 4F20.12)

Result layout, all fields D20.12:
    energy, dipole (x, y, z)                      one line
    gradient                                      NAtoms lines of 3
    polarizability                                2 lines of 3
    dipole derivatives                            3*NAtoms lines of 3
    force constants (lower triangle)              3 per line
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from functools import cached_property

import numpy as np

from qchem_g16.utils.constants import (
    GAUSSIAN_FIELD_FORMAT,
    GAUSSIAN_FIELDS_PER_LINE,
)
from qchem_g16.utils.mixins import FileMixin
from qchem_g16.utils.utils import (
    CountMismatchError,
    EmptyRequestError,
    ParseError,
    TruncatedInputError,
    parse_numbers_from_string,
)

logger = logging.getLogger(__name__)

# the atomic number occupies the first 11 columns of an atom line
ATOMIC_NUMBER_COLUMNS = 11
SUPPORTED_DERIVATIVE_ORDERS = (0, 1, 2)


@dataclass(frozen=True)
class CalculationRequest:
    """
    One energy/derivative request from Gaussian.

    Coordinates are in Bohr, in the same atom order as `atomic_numbers`.
    """

    atom_count: int
    derivative_order: int
    charge: int
    spin: int
    atomic_numbers: tuple
    coordinates: tuple

    def __post_init__(self):
        num_atomic_numbers = len(self.atomic_numbers)
        if not num_atomic_numbers == len(self.coordinates) == self.atom_count:
            raise ValueError(
                f"Request declares {self.atom_count} atoms but holds "
                f"{len(self.atomic_numbers)} atomic numbers and "
                f"{len(self.coordinates)} coordinates."
            )

    @property
    def geometry(self):
        """Atomic number and coordinates, one atom per line."""
        lines = [
            f"{z}   {x}   {y}   {zc}"
            for z, (x, y, zc) in zip(self.atomic_numbers, self.coordinates)
        ]
        return "\n".join(lines).strip()

    @property
    def num_hessian_values(self):
        n = 3 * self.atom_count
        return n * (n + 1) // 2

    @property
    def wants_gradient(self):
        return self.derivative_order >= 1

    @property
    def wants_hessian(self):
        return self.derivative_order >= 2


class GaussianExternalInput(FileMixin):
    """
    Request file Gaussian writes for an external program.

    Args:
        filename (str): Path to the ".EIn" file.
    """

    def __init__(self, filename):
        self.filename = filename

    @cached_property
    def request(self):
        return self._parse_request()

    def _parse_request(self):
        lines = self.raw_contents
        if not lines:
            raise EmptyRequestError(
                f"Gaussian input file {self.filepath} is empty."
            )

        atom_count, derivative_order, charge, spin = (
            parse_numbers_from_string(4, lines[0], number_type=int)
        )
        if atom_count <= 0:
            raise ParseError(f"Invalid number of atoms: {atom_count}.")
        if derivative_order not in SUPPORTED_DERIVATIVE_ORDERS:
            raise ParseError(
                f"Invalid derivative order {derivative_order}; "
                f"expected one of {SUPPORTED_DERIVATIVE_ORDERS}."
            )
        logger.debug(
            f"Request header: {atom_count} atoms, derivative order "
            f"{derivative_order}, charge {charge}, multiplicity {spin}."
        )

        atom_lines = lines[1 : atom_count + 1]
        if len(atom_lines) < atom_count:
            raise TruncatedInputError(
                f"Gaussian input file {self.filepath} is truncated: "
                f"expected {atom_count} atom lines, got {len(atom_lines)}."
            )

        atomic_numbers = []
        coordinates = []
        for line in atom_lines:
            atomic_number, position = self._parse_atom_line(line)
            atomic_numbers.append(atomic_number)
            coordinates.append(position)

        return CalculationRequest(
            atom_count=atom_count,
            derivative_order=derivative_order,
            charge=charge,
            spin=spin,
            atomic_numbers=tuple(atomic_numbers),
            coordinates=tuple(coordinates),
        )

    @staticmethod
    def _parse_atom_line(line):
        atom_field = line[:ATOMIC_NUMBER_COLUMNS]
        coordinate_field = line[ATOMIC_NUMBER_COLUMNS:]
        (atomic_number,) = parse_numbers_from_string(
            1, atom_field, number_type=int
        )
        # fourth value is the MM charge, not needed by Q-Chem
        x, y, z, _ = parse_numbers_from_string(4, coordinate_field)
        return atomic_number, (x, y, z)


def _current_umask():
    umask = os.umask(0)
    os.umask(umask)
    return umask


def format_fields(values):
    """Render values as consecutive D20.12-style fields."""
    return "".join(GAUSSIAN_FIELD_FORMAT.format(value) for value in values)


def format_block(values, per_line=GAUSSIAN_FIELDS_PER_LINE):
    """
    Render values `per_line` fields to a line.

    Every full line ends with a newline; a trailing partial line does not.
    """
    text = []
    for count, value in enumerate(values, start=1):
        text.append(GAUSSIAN_FIELD_FORMAT.format(value))
        if count % per_line == 0:
            text.append("\n")
    return "".join(text)


class GaussianExternalOutputWriter:
    """
    Writer for the result file Gaussian reads back from an external program.

    Dipole, polarizability and dipole derivatives are not computed and are
    written as zeros.

    Args:
        request (CalculationRequest): The request being answered; its
            derivative order decides which blocks are written.
        energy (float): Total energy in Hartree.
        gradient (array-like, optional): 3*NAtoms values in atom
            order; an (NAtoms, 3) array is flattened row by row.
            Required when the request asks for derivatives.
        hessian (sequence of float, optional): Force constants already in
            Gaussian's lower-triangular order. Required when the request
            asks for second derivatives.
    """

    def __init__(self, request, energy, gradient=None, hessian=None):
        self.request = request
        self.energy = energy
        self.gradient = None if gradient is None else np.ravel(gradient)
        self.hessian = None if hessian is None else np.ravel(hessian)

    def render(self):
        """
        Render the complete result document.

        Returns:
            str: File contents, ready to be written in one pass.
        """
        self._check_blocks()
        blocks = [self._energy_and_dipole_block()]
        if self.request.wants_gradient:
            blocks.append(self._gradient_block())
            blocks.append(self._polarizability_and_dipole_derivative_block())
        if self.request.wants_hessian:
            blocks.append(self._hessian_block())
        return "".join(blocks)

    def write(self, filename):
        """
        Write the result file.

        The document is written to a temporary file next to `filename` and
        renamed over it, so an error never leaves a partial result behind.

        Args:
            filename (str): Destination path (Gaussian's OutputFile).
        """
        contents = self.render()
        filepath = os.path.abspath(filename)
        folder, basename = os.path.split(filepath)
        logger.debug(f"Writing Gaussian external output file: {filepath}")
        fd, tmp_filepath = tempfile.mkstemp(
            dir=folder, prefix=f".{basename}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w") as f:
                # mkstemp creates the file with mode 0600
                os.fchmod(f.fileno(), 0o666 & ~_current_umask())
                f.write(contents)
            os.replace(tmp_filepath, filepath)
        except BaseException:
            if os.path.exists(tmp_filepath):
                os.remove(tmp_filepath)
            raise
        logger.info(
            f"Finished writing Gaussian external output file: {filepath}"
        )
        return filepath

    def _check_blocks(self):
        if self.request.wants_gradient:
            if self.gradient is None:
                raise ValueError(
                    f"Derivative order {self.request.derivative_order} "
                    "requires a gradient."
                )
            if len(self.gradient) != 3 * self.request.atom_count:
                raise CountMismatchError(
                    expected=3 * self.request.atom_count,
                    got=len(self.gradient),
                )
        if self.request.wants_hessian:
            if self.hessian is None:
                raise ValueError(
                    f"Derivative order {self.request.derivative_order} "
                    "requires a Hessian."
                )
            if len(self.hessian) != self.request.num_hessian_values:
                raise CountMismatchError(
                    expected=self.request.num_hessian_values,
                    got=len(self.hessian),
                )

    def _energy_and_dipole_block(self):
        # energy and dipole share the first line
        return format_fields([self.energy]) + format_block([0.0, 0.0, 0.0])

    def _gradient_block(self):
        return format_block(self.gradient)

    def _polarizability_and_dipole_derivative_block(self):
        # 6 polarizability + 9*NAtoms dipole derivative components
        num_lines = 2 + 3 * self.request.atom_count
        return format_block([0.0] * 3 * num_lines)

    def _hessian_block(self):
        return format_block(self.hessian) + "\n"
