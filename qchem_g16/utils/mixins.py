"""
Mixin classes for file handling.

- FileMixin: path helpers and cached file contents
- YAMLFileMixin: YAML parsing on top of FileMixin
"""

import os
from functools import cached_property


class FileMixin:
    """
    Mixin class for files that can be opened and read.

    Consumers set `self.filename`. Contents are read once and cached.
    """

    @property
    def filepath(self):
        return os.path.abspath(self.filename)

    @cached_property
    def raw_contents(self):
        """
        File contents as a list of lines with only the line ending removed.

        Lines end at a line feed, optionally preceded by a carriage return;
        form feeds and other Unicode line boundaries stay inside the line.
        Fixed-column formats and prefix matches that include leading spaces
        need the lines untouched.

        Returns:
            list[str]: One entry per line.
        """
        lines = self.content_lines_string.split("\n")
        if lines[-1] == "":
            lines.pop()
        return [line.removesuffix("\r") for line in lines]

    @cached_property
    def content_lines_string(self):
        with open(self.filepath, "r", newline="") as f:
            return f.read()


class YAMLFileMixin(FileMixin):
    """
    Mixin class for YAML files.
    """

    @cached_property
    def yaml_contents_dict(self):
        """
        Parse the YAML file with `yaml.safe_load`.

        Returns:
            dict: Parsed root mapping; an empty file gives an empty dict.
        """
        import yaml

        return yaml.safe_load(self.content_lines_string) or {}

    @property
    def yaml_contents_keys(self):
        return self.yaml_contents_dict.keys()

    def yaml_contents_by_key(self, key):
        return self.yaml_contents_dict.get(key)
