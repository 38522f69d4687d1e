# composem/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details


class SemanticsError(Exception):
    """
    Base exception class for errors raised by the semantics library.
    """


class ValidationError(SemanticsError):
    """
    Raised when a composed machine is built with an invalid structure, such as
    a transition between states that do not belong to the machine.
    """


class AssemblyError(SemanticsError):
    """
    Raised when a component machine or assembly is malformed.
    """
