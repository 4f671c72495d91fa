# Copyright the ephemeral-gpg contributors
# SPDX-License-Identifier: Apache-2.0

"""
<Program Name>
  exceptions.py

<Started>
  March 3, 2014

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Define Exceptions raised by ephemeral-gpg. Following the practice from
  securesystemslib the names chosen for exception classes end in 'Error'.

"""
from securesystemslib.exceptions import Error


class MissingFileError(Error):
    """Indicates that a file required by an operation does not exist."""


class InvalidOutputError(Error):
    """Indicates that gpg output could not be parsed."""


class CommandError(Error):
    """Indicates that a gpg command exited with a non-zero return value.

    Attributes:
      command: The executed shell command line (passphrases redacted).
      returncode: The exit code of the gpg process.
      output: The combined standard output and error of the process, or None
          if the output was not captured.

    """

    def __init__(self, command, returncode, output=None):
        self.command = command
        self.returncode = returncode
        self.output = output

        if output is None:
            message = "gpg failed"
        else:
            message = "gpg failed: {}".format(output)

        super().__init__(message)
