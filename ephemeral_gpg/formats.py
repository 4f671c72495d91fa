# Copyright the ephemeral-gpg contributors
# SPDX-License-Identifier: Apache-2.0

"""
<Program Name>
  formats.py

<Started>
  March 5, 2014

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Helpers to validate API inputs.

"""
import os
from re import fullmatch

from securesystemslib.exceptions import FormatError


def _err(arg, expected):
    return FormatError(f"expected {expected}, got '{arg} ({type(arg)})'")


def _check_str(arg):
    if not isinstance(arg, str):
        raise _err(arg, "str")


def _check_optional_str(arg):
    if arg is not None:
        _check_str(arg)


def _check_path(arg):
    """Check filesystem path, i.e. str or os.PathLike."""
    if not isinstance(arg, (str, os.PathLike)):
        raise _err(arg, "path")


def _check_email(arg):
    """Check recipient email address, i.e. 'local@domain' without whitespace
    or angle brackets."""
    _check_str(arg)
    if fullmatch(r"^[^\s<>@]+@[^\s<>@]+$", arg) is None:
        raise _err(arg, "email address")


def _check_script_value(arg):
    """Check single line value for a gpg batch script."""
    _check_str(arg)
    if "\n" in arg or "\r" in arg:
        raise _err(arg, "single line str")
