# Q-Chem QM/MM energy line, e.g.
#  The QM part of the energy is      -76.123456789012
# matched as a literal prefix (including the leading space), first match wins
qm_energy_line_prefix = " The QM part of the energy is"

# Q-Chem input sections
qchem_section_pattern = r"(?im)^\s*\$(\w+)\s*$"
qchem_rem_block_pattern = r"(?is)\$rem\b.*?\$end"

# Gaussian external command line: a literal "null" marks an unused file
gaussian_null_filename = "null"
