import logging
import os
import shlex
import sys

import pytest

from qchem_g16.settings.user import QChemG16UserSettings


# keep tests independent of the user's environment and ~/.qchem_g16
@pytest.fixture(autouse=True)
def isolated_user_settings(tmp_path_factory, monkeypatch):
    config_dir = tmp_path_factory.mktemp("user_config")
    monkeypatch.setattr(
        QChemG16UserSettings, "USER_CONFIG_DIR", str(config_dir)
    )
    monkeypatch.delenv("QCHEM_RUNDIR", raising=False)
    return str(config_dir)


# create_logger replaces the root handlers; close them after each test
@pytest.fixture(autouse=True)
def reset_root_logger():
    yield
    root = logging.getLogger()
    for handler in root.handlers:
        handler.close()
    root.handlers = []
    root.filters = []


@pytest.fixture()
def test_data_directory():
    current_directory = os.path.dirname(os.path.abspath(__file__))
    return os.path.abspath(os.path.join(current_directory, "data"))


############ Gaussian Fixtures ##################
@pytest.fixture()
def gaussian_test_directory(test_data_directory):
    return os.path.join(test_data_directory, "GaussianTests")


@pytest.fixture()
def gaussian_external_test_directory(gaussian_test_directory):
    return os.path.join(gaussian_test_directory, "external")


@pytest.fixture()
def water_sp_einfile(gaussian_external_test_directory):
    return os.path.join(gaussian_external_test_directory, "water_sp.EIn")


@pytest.fixture()
def water_force_einfile(gaussian_external_test_directory):
    return os.path.join(gaussian_external_test_directory, "water_force.EIn")


@pytest.fixture()
def water_freq_einfile(gaussian_external_test_directory):
    return os.path.join(gaussian_external_test_directory, "water_freq.EIn")


@pytest.fixture()
def truncated_einfile(gaussian_external_test_directory):
    return os.path.join(
        gaussian_external_test_directory, "water_truncated.EIn"
    )


@pytest.fixture()
def empty_einfile(gaussian_external_test_directory):
    return os.path.join(gaussian_external_test_directory, "empty.EIn")


############ Q-Chem Fixtures ##################
@pytest.fixture()
def qchem_test_directory(test_data_directory):
    return os.path.join(test_data_directory, "QChemTests")


@pytest.fixture()
def water_rundir(qchem_test_directory):
    return os.path.join(qchem_test_directory, "rundir_water")


@pytest.fixture()
def water_qchem_outfile(water_rundir):
    return os.path.join(water_rundir, "qchem.out")


@pytest.fixture()
def params_remfile(qchem_test_directory):
    return os.path.join(qchem_test_directory, "params.rem")


@pytest.fixture()
def fake_qchem_executable(qchem_test_directory):
    script = os.path.join(qchem_test_directory, "fake_qchem.py")
    return f"{shlex.quote(sys.executable)} {shlex.quote(script)}"


@pytest.fixture()
def failing_qchem_executable():
    return f"{shlex.quote(sys.executable)} -c 'import sys; sys.exit(3)'"
