"""
User configuration for qchem_g16.

Gaussian runs the external program with a fixed command line, so defaults
that should not be repeated in every route section live in an optional
YAML file:

    ~/.qchem_g16/
    └── usersettings.yaml

Recognised keys:
    RUNDIR:      Q-Chem run directory
    EXECUTABLE:  Q-Chem executable (or wrapper script)
    REM:         file holding the $rem section for Q-Chem runs
    NUM_THREADS: threads passed to Q-Chem with -nt
"""

import logging
import os

from qchem_g16.io.yaml import YAMLFile

logger = logging.getLogger(__name__)

RUNDIR_ENVVAR = "QCHEM_RUNDIR"
DEFAULT_RUNDIR = "."


class QChemG16UserSettings:
    """
    User settings read from ~/.qchem_g16/usersettings.yaml.

    A missing file gives empty settings.

    Args:
        config_dir (str, optional): Directory holding the settings file.
            Defaults to USER_CONFIG_DIR.
    """

    USER_YAML_FILE = "usersettings.yaml"
    USER_CONFIG_DIR = os.path.expanduser("~/.qchem_g16")

    def __init__(self, config_dir=None):
        self.config_dir = config_dir or self.USER_CONFIG_DIR
        self.yaml = os.path.join(self.config_dir, self.USER_YAML_FILE)
        try:
            self.data = YAMLFile(filename=self.yaml).yaml_contents_dict
        except FileNotFoundError:
            self.data = {}
        if not isinstance(self.data, dict):
            raise ValueError(
                f"User settings file {self.yaml} must hold a mapping, "
                f"got {type(self.data).__name__}."
            )

    def __repr__(self):
        return f"{self.__class__.__name__}(yaml={self.yaml!r})"

    @property
    def rundir(self):
        rundir = self.data.get("RUNDIR")
        return os.path.expanduser(rundir) if rundir else None

    @property
    def executable(self):
        executable = self.data.get("EXECUTABLE")
        return os.path.expanduser(executable) if executable else None

    @property
    def rem(self):
        rem = self.data.get("REM")
        return os.path.expanduser(rem) if rem else None

    @property
    def num_threads(self):
        num_threads = self.data.get("NUM_THREADS")
        return int(num_threads) if num_threads is not None else None


def resolve_rundir(rundir=None, user_settings=None):
    """
    Pick the Q-Chem run directory.

    Precedence: explicit value, then the QCHEM_RUNDIR environment
    variable, then the user settings, then the current directory.
    """
    if rundir:
        return rundir
    rundir = os.environ.get(RUNDIR_ENVVAR)
    if rundir:
        logger.debug(f"Run directory from ${RUNDIR_ENVVAR}: {rundir}")
        return rundir
    if user_settings is not None and user_settings.rundir:
        logger.debug(f"Run directory from {user_settings.yaml}")
        return user_settings.rundir
    return DEFAULT_RUNDIR
