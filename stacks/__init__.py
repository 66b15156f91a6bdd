"""
Copyright (c) 2020, the Decred developers
See LICENSE for details
"""


class StacksError(Exception):
    pass


class ConstructionError(StacksError):
    """
    A required field is missing at serialization time, or a value does not fit
    the fixed size or length bound of its wire field.
    """

    pass


class FormatError(StacksError):
    """
    Serialized bytes could not be decoded. Raised for unknown tag bytes and
    for reads past the end of the buffer.
    """

    pass


class SigningPreconditionError(StacksError):
    """
    A signing or verification step was attempted without the fields it
    requires, or out of order.
    """

    pass
