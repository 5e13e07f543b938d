"""
General utilities shared across qchem_g16.

Holds the exception hierarchy raised while translating Q-Chem results
into Gaussian's external-program format, and the fixed-count numeric
field parser every reader in the package is built on.
"""

import logging

logger = logging.getLogger(__name__)


class QChemG16Error(Exception):
    """
    Base class for all errors raised by qchem_g16.

    Every error is terminal for the translation: nothing catches it
    inside the package, the command line reports it and exits.
    """

    pass


class ParseError(QChemG16Error, ValueError):
    """A token could not be converted to the requested numeric type."""

    pass


class CountMismatchError(QChemG16Error, ValueError):
    """A fixed-size numeric field held the wrong number of values."""

    def __init__(self, expected, got):
        self.expected = expected
        self.got = got
        super().__init__(f"expected {expected} values, got {got}")


class EmptyRequestError(QChemG16Error):
    """The Gaussian request file has no header line."""

    pass


class TruncatedInputError(QChemG16Error):
    """The Gaussian request file ends before all atoms were read."""

    pass


class MissingEnergyLineError(QChemG16Error):
    """The Q-Chem output holds no QM energy line."""

    pass


class HessianAssemblyError(QChemG16Error):
    """The triangular Hessian data does not fill the full matrix."""

    pass


class QChemRunError(QChemG16Error):
    """The Q-Chem executable exited with a non-zero status."""

    pass


def _convert_token(token, number_type):
    try:
        return number_type(token)
    except ValueError as e:
        raise ParseError(
            f"failed to parse {token!r} as {number_type.__name__}"
        ) from e


def parse_numbers_from_string(n, data, number_type=float):
    """
    Parse exactly `n` whitespace-separated numbers from a block of text.

    Every token must convert with `number_type` and the number of tokens
    must be exactly `n`. Nothing is returned on failure.

    Args:
        n (int): Number of values the field must hold.
        data (str): Text to tokenize; any whitespace separates values.
        number_type (type): `float` or `int`. Defaults to `float`.

    Returns:
        list: The `n` parsed values, in order.

    Raises:
        ParseError: If any token is not a valid `number_type`.
        CountMismatchError: If the number of tokens is not `n`.
    """
    values = [_convert_token(token, number_type) for token in data.split()]
    if len(values) != n:
        raise CountMismatchError(expected=n, got=len(values))
    return values

