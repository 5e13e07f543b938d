"""CLI interface for qchem_g16.

Gaussian runs the program given with External="..." as

    prog layer InputFile OutputFile MsgFile FChkFile MatElFile

so options go into the External string and the positional arguments are
appended by Gaussian, e.g.

    External="qchem-g16 -e qchem --rem /path/to/params.rem"
"""

import logging

import click

from qchem_g16 import __version__
from qchem_g16.settings.user import QChemG16UserSettings, resolve_rundir
from qchem_g16.translate import run_gaussian_external
from qchem_g16.utils.logger import create_logger
from qchem_g16.utils.repattern import gaussian_null_filename
from qchem_g16.utils.utils import QChemG16Error

logger = logging.getLogger(__name__)


def _given(filename):
    return filename is not None and filename != gaussian_null_filename


@click.command(name="qchem-g16")
@click.version_option(version=__version__)
@click.option(
    "-d",
    "--rundir",
    type=click.Path(file_okay=False),
    default=None,
    help="Q-Chem run directory. Defaults to $QCHEM_RUNDIR, then RUNDIR "
    "from the user settings, then the current directory.",
)
@click.option(
    "-e",
    "--executable",
    type=str,
    default=None,
    help="Q-Chem executable. If given, Q-Chem is run before translating; "
    "otherwise the results already in the run directory are used.",
)
@click.option(
    "--rem",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="File with the $rem section for the Q-Chem input.",
)
@click.option(
    "-n",
    "--num-threads",
    type=int,
    default=None,
    help="Number of threads for Q-Chem.",
)
@click.option(
    "--translate-only",
    is_flag=True,
    default=False,
    help="Only translate the results already in the run directory, even "
    "if an executable is configured in the user settings.",
)
@click.option("--debug/--no-debug", default=False, help="Debug logging.")
@click.option(
    "--stream/--no-stream",
    default=True,
    help="Also log to stdout, which Gaussian copies into its log.",
)
@click.argument("layer", type=str)
@click.argument("inputfile", type=click.Path(exists=True, dir_okay=False))
@click.argument("outputfile", type=click.Path(dir_okay=False))
@click.argument("msgfile", type=str, required=False)
@click.argument("fchkfile", type=str, required=False)
@click.argument("matelfile", type=str, required=False)
def entry_point(
    rundir,
    executable,
    rem,
    num_threads,
    translate_only,
    debug,
    stream,
    layer,
    inputfile,
    outputfile,
    msgfile,
    fchkfile,
    matelfile,
):
    """Answer a Gaussian External request with Q-Chem results."""
    create_logger(
        debug=debug,
        stream=stream,
        logfile=msgfile if _given(msgfile) else None,
    )
    logger.debug(
        f"qchem-g16 {__version__}, layer {layer}, input {inputfile}, "
        f"output {outputfile}"
    )
    if _given(fchkfile) or _given(matelfile):
        logger.debug("Checkpoint and matrix element files are not used.")

    try:
        user_settings = QChemG16UserSettings()
        rundir = resolve_rundir(rundir, user_settings=user_settings)
        if translate_only:
            if executable is not None:
                raise click.UsageError(
                    "-e/--executable cannot be combined with --translate-only."
                )
            logger.debug("Translate-only run; Q-Chem is not started.")
        else:
            executable = executable or user_settings.executable
        rem = rem or user_settings.rem
        if num_threads is None:
            num_threads = user_settings.num_threads

        rem_text = None
        if executable is not None:
            if rem is None:
                raise click.UsageError(
                    "--rem is required when Q-Chem is run (-e/--executable)."
                )
            with open(rem) as f:
                rem_text = f.read()

        written = run_gaussian_external(
            inputfile,
            outputfile,
            rundir=rundir,
            executable=executable,
            rem=rem_text,
            num_threads=num_threads,
        )
    except (QChemG16Error, OSError, ValueError) as e:
        logger.error(f"Translation failed: {e}")
        raise click.ClickException(str(e)) from e

    logger.info(f"Results for Gaussian written to {written}")


def main():  # pragma: no cover
    """
    The main function executes on commands:
    `python -m qchem_g16.cli.main` and `$ qchem-g16`.
    """
    entry_point()


if __name__ == "__main__":
    main()
