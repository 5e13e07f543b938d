"""
Translation of Q-Chem results into Gaussian's external-program output.

`translate_qchem_to_gaussian` is the one translation routine: everything
it does is decided by the parsed request, never by fixed atom counts or
derivative orders. `run_gaussian_external` wraps it with reading the
request and, optionally, running Q-Chem first.
"""

import logging

from qchem_g16.analysis.hessian import reindex_hessian
from qchem_g16.io.gaussian.external import (
    GaussianExternalInput,
    GaussianExternalOutputWriter,
)
from qchem_g16.io.qchem.folder import QChemRunFolder
from qchem_g16.jobs.qchem.runner import QChemRunner

logger = logging.getLogger(__name__)


def translate_qchem_to_gaussian(request, run_folder, outputfile):
    """
    Write Gaussian's result file from a finished Q-Chem run.

    The gradient is copied as stored in efield.dat; only the Hessian is
    reordered and scaled.

    Args:
        request (CalculationRequest): The Gaussian request.
        run_folder (QChemRunFolder): Run directory holding qchem.out and,
            depending on the derivative order, efield.dat and hessian.dat.
        outputfile (str): Gaussian's OutputFile.

    Returns:
        str: Absolute path of the written file.
    """
    atom_count = request.atom_count
    energy = run_folder.energy()
    logger.info(f"QM energy: {energy} Hartree")

    gradient = None
    if request.wants_gradient:
        gradient = run_folder.gradient(atom_count)

    hessian = None
    if request.wants_hessian:
        hessian = reindex_hessian(
            run_folder.hessian_upper_triangle(atom_count), atom_count
        )

    writer = GaussianExternalOutputWriter(
        request=request, energy=energy, gradient=gradient, hessian=hessian
    )
    return writer.write(outputfile)


def run_gaussian_external(
    inputfile,
    outputfile,
    rundir=".",
    executable=None,
    rem=None,
    num_threads=None,
):
    """
    Answer one Gaussian external request.

    Args:
        inputfile (str): Gaussian's InputFile (.EIn).
        outputfile (str): Gaussian's OutputFile (.EOu).
        rundir (str): Q-Chem run directory.
        executable (str, optional): Q-Chem command. When None, the results
            already in `rundir` are translated without running Q-Chem.
        rem (str, optional): Rem text for the Q-Chem input; required with
            `executable`.
        num_threads (int, optional): Threads for Q-Chem.

    Returns:
        str: Absolute path of the written output file.
    """
    request = GaussianExternalInput(inputfile).request
    logger.info(
        f"Gaussian request: {request.atom_count} atoms, derivative order "
        f"{request.derivative_order}, charge {request.charge}, "
        f"multiplicity {request.spin}"
    )
    logger.debug(f"Geometry (Bohr):\n{request.geometry}")

    if executable is not None:
        if rem is None:
            raise ValueError("A rem file is required to run Q-Chem.")
        runner = QChemRunner(
            executable=executable, rundir=rundir, num_threads=num_threads
        )
        run_folder = runner.run(request, rem)
    else:
        logger.debug(f"Translating existing Q-Chem results in {rundir}")
        run_folder = QChemRunFolder(rundir)

    return translate_qchem_to_gaussian(request, run_folder, outputfile)
