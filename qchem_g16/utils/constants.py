"""Constants not found in ase units."""

import logging

from ase import units

logger = logging.getLogger(__name__)

# Q-Chem hessian.dat force constants to the units Gaussian reads back
# from an external program (Hartree/Bohr^2).
HESSIAN_CONVERSION_FACTOR = 4.46552493159e-4

# Gaussian writes request coordinates in Bohr; Q-Chem reads Angstrom.
bohr_to_angstrom = units.Bohr / units.Angstrom  # 0.52917721 Å

# Gaussian's external output grammar: D20.12 fields, three per line
GAUSSIAN_FIELD_FORMAT = "{:+20.12f}"
GAUSSIAN_FIELDS_PER_LINE = 3
