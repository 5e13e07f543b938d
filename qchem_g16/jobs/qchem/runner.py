import logging
import os
import shlex
import subprocess

from qchem_g16.io.qchem.folder import QChemRunFolder
from qchem_g16.jobs.qchem.writer import QChemInputWriter
from qchem_g16.utils.utils import QChemRunError

logger = logging.getLogger(__name__)


class QChemRunner:
    """
    Runs Q-Chem for a Gaussian request inside the run directory.

    The run consists of writing qchem.in, building the command, starting
    the process and checking its exit status. Q-Chem (or the wrapper
    script given as executable) is expected to leave qchem.out, efield.dat
    and hessian.dat in the run directory.

    Args:
        executable (str): Q-Chem executable or wrapper command; may carry
            its own arguments.
        rundir (str): Run directory; created if missing.
        num_threads (int, optional): Passed to Q-Chem as "-nt".
    """

    def __init__(self, executable, rundir=".", num_threads=None):
        self.executable = executable
        self.rundir = os.path.abspath(rundir)
        self.num_threads = num_threads

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(executable={self.executable!r}, "
            f"rundir={self.rundir!r})"
        )

    @property
    def run_folder(self):
        return QChemRunFolder(self.rundir)

    @property
    def job_inputfile(self):
        return os.path.join(self.rundir, QChemInputWriter.INPUT_FILENAME)

    @property
    def job_stdoutfile(self):
        return os.path.join(self.rundir, "qchem.stdout")

    @property
    def job_errfile(self):
        return os.path.join(self.rundir, "qchem.err")

    def run(self, request, rem):
        """
        Run Q-Chem for `request` with the given rem text.

        Returns:
            QChemRunFolder: The run directory, ready to be read.

        Raises:
            QChemRunError: If the process exits with a non-zero status.
        """
        logger.debug(f"Running Q-Chem with runner {self}")
        self._write_input(request, rem)
        command = self._get_command()
        process = self._create_process(command)
        returncode = self._run(process)
        self._postrun(command, returncode)
        return self.run_folder

    def _write_input(self, request, rem):
        QChemInputWriter(request=request, rem=rem).write(
            target_directory=self.rundir
        )

    def _get_command(self):
        command = shlex.split(self.executable)
        if self.num_threads is not None:
            command += ["-nt", str(self.num_threads)]
        command += [
            os.path.basename(self.job_inputfile),
            QChemRunFolder.OUTPUT_FILENAME,
        ]
        return command

    def _create_process(self, command):
        with (
            open(self.job_stdoutfile, "w") as out,
            open(self.job_errfile, "w") as err,
        ):
            logger.info(
                f"Command executed: {shlex.join(command)}\n"
                f"Running in: {self.rundir}\n"
                f"Writing stdout to: {self.job_stdoutfile}\n"
                f"And err file to: {self.job_errfile}"
            )
            return subprocess.Popen(
                command,
                stdout=out,
                stderr=err,
                cwd=self.rundir,
            )

    def _run(self, process):
        process.communicate()
        return process.poll()

    def _postrun(self, command, returncode):
        if returncode != 0:
            raise QChemRunError(
                f"Q-Chem command '{shlex.join(command)}' exited with status "
                f"{returncode}; see {self.job_errfile}."
            )
        logger.debug("Q-Chem finished normally.")
