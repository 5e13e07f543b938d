import os
import shutil

import numpy as np
import pytest

from qchem_g16.io.gaussian.external import GaussianExternalInput
from qchem_g16.io.qchem.folder import QChemRunFolder
from qchem_g16.translate import (
    run_gaussian_external,
    translate_qchem_to_gaussian,
)
from qchem_g16.utils.constants import HESSIAN_CONVERSION_FACTOR
from qchem_g16.utils.utils import MissingEnergyLineError


def read_fields(line):
    return [float(line[i : i + 20]) for i in range(0, len(line), 20)]


def expected_hessian(hessian_file, atom_count):
    """Lower triangle of the full Hessian, row by row, in Gaussian units."""
    n = 3 * atom_count
    values = np.loadtxt(hessian_file).ravel()
    matrix = np.zeros((n, n))
    matrix[np.triu_indices(n)] = values
    matrix = matrix + np.triu(matrix, 1).T
    return matrix[np.tril_indices(n)] * HESSIAN_CONVERSION_FACTOR


class TestTranslateWater:
    def test_frequency_request(self, tmpdir, water_freq_einfile, water_rundir):
        request = GaussianExternalInput(water_freq_einfile).request
        outputfile = str(tmpdir.join("Gaussian.EOu"))
        translate_qchem_to_gaussian(
            request, QChemRunFolder(water_rundir), outputfile
        )

        with open(outputfile) as f:
            lines = f.read().splitlines()
        assert len(lines) == 1 + 3 + 11 + 15 + 1
        assert read_fields(lines[0]) == [-76.026760737028, 0.0, 0.0, 0.0]

        gradient = np.loadtxt(os.path.join(water_rundir, "efield.dat"))
        written_gradient = np.array([read_fields(line) for line in lines[1:4]])
        assert np.allclose(written_gradient, gradient, rtol=0, atol=1e-12)

        for line in lines[4:15]:
            assert read_fields(line) == [0.0, 0.0, 0.0]

        written_hessian = np.concatenate(
            [read_fields(line) for line in lines[15:30]]
        )
        reference = expected_hessian(
            os.path.join(water_rundir, "hessian.dat"), atom_count=3
        )
        assert np.allclose(written_hessian, reference, rtol=0, atol=1e-12)
        assert lines[30] == ""

    def test_force_request(self, tmpdir, water_force_einfile, water_rundir):
        request = GaussianExternalInput(water_force_einfile).request
        outputfile = str(tmpdir.join("Gaussian.EOu"))
        translate_qchem_to_gaussian(
            request, QChemRunFolder(water_rundir), outputfile
        )
        with open(outputfile) as f:
            text = f.read()
        assert not text.endswith("\n\n")
        assert len(text.splitlines()) == 1 + 3 + 11

    def test_energy_request(self, tmpdir, water_sp_einfile, water_rundir):
        request = GaussianExternalInput(water_sp_einfile).request
        outputfile = str(tmpdir.join("Gaussian.EOu"))
        translate_qchem_to_gaussian(
            request, QChemRunFolder(water_rundir), outputfile
        )
        with open(outputfile) as f:
            assert f.read() == (
                "    -76.026760737028"
                "     +0.000000000000"
                "     +0.000000000000"
                "     +0.000000000000\n"
            )

    def test_force_request_does_not_need_hessian(
        self, tmpdir, water_force_einfile, water_rundir
    ):
        rundir = tmpdir.mkdir("rundir")
        for filename in ("qchem.out", "efield.dat"):
            shutil.copy(os.path.join(water_rundir, filename), str(rundir))
        request = GaussianExternalInput(water_force_einfile).request
        outputfile = str(tmpdir.join("Gaussian.EOu"))
        translate_qchem_to_gaussian(
            request, QChemRunFolder(str(rundir)), outputfile
        )
        assert os.path.isfile(outputfile)

    def test_frequency_request_needs_hessian(
        self, tmpdir, water_freq_einfile, water_rundir
    ):
        rundir = tmpdir.mkdir("rundir")
        for filename in ("qchem.out", "efield.dat"):
            shutil.copy(os.path.join(water_rundir, filename), str(rundir))
        request = GaussianExternalInput(water_freq_einfile).request
        outputfile = str(tmpdir.join("Gaussian.EOu"))
        with pytest.raises(FileNotFoundError):
            translate_qchem_to_gaussian(
                request, QChemRunFolder(str(rundir)), outputfile
            )
        assert not os.path.exists(outputfile)

    def test_missing_energy_leaves_no_output(self, tmpdir, water_sp_einfile):
        rundir = tmpdir.mkdir("rundir")
        rundir.join("qchem.out").write(" Q-Chem fatal error occurred\n")
        request = GaussianExternalInput(water_sp_einfile).request
        outputfile = str(tmpdir.join("Gaussian.EOu"))
        with pytest.raises(MissingEnergyLineError):
            translate_qchem_to_gaussian(
                request, QChemRunFolder(str(rundir)), outputfile
            )
        assert not os.path.exists(outputfile)


class TestRunGaussianExternal:
    def test_translate_existing_results(
        self, tmpdir, water_freq_einfile, water_rundir
    ):
        outputfile = str(tmpdir.join("Gaussian.EOu"))
        written = run_gaussian_external(
            water_freq_einfile, outputfile, rundir=water_rundir
        )
        assert written == os.path.abspath(outputfile)
        assert os.path.isfile(outputfile)

    def test_run_qchem_then_translate(
        self,
        tmpdir,
        water_freq_einfile,
        water_rundir,
        params_remfile,
        fake_qchem_executable,
    ):
        with open(params_remfile) as f:
            rem = f.read()
        rundir = str(tmpdir.join("rundir"))
        outputfile = str(tmpdir.join("Gaussian.EOu"))
        run_gaussian_external(
            water_freq_einfile,
            outputfile,
            rundir=rundir,
            executable=fake_qchem_executable,
            rem=rem,
        )
        assert os.path.isfile(os.path.join(rundir, "qchem.in"))

        reference_file = str(tmpdir.join("reference.EOu"))
        run_gaussian_external(
            water_freq_einfile, reference_file, rundir=water_rundir
        )
        with open(outputfile) as f, open(reference_file) as g:
            assert f.read() == g.read()

    def test_executable_requires_rem(
        self, tmpdir, water_freq_einfile, fake_qchem_executable
    ):
        with pytest.raises(ValueError, match="rem"):
            run_gaussian_external(
                water_freq_einfile,
                str(tmpdir.join("Gaussian.EOu")),
                rundir=str(tmpdir),
                executable=fake_qchem_executable,
            )
