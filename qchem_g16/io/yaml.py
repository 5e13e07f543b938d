import logging

from qchem_g16.utils.mixins import YAMLFileMixin

logger = logging.getLogger(__name__)


class YAMLFile(YAMLFileMixin):
    """
    A YAML file, parsed on first access.

    Args:
        filename (str): Path to the YAML file.
    """

    def __init__(self, filename):
        self.filename = filename
