# Copyright the ephemeral-gpg contributors
# SPDX-License-Identifier: Apache-2.0

"""
<Program Name>
  process.py

<Started>
  March 3, 2014

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Provide a common interface for running the external gpg tool:

  - build a safe shell command line, where every argument is escaped,
  - run gpg in an ephemeral home directory without its default keyring,
  - either let gpg interact with the terminal (`run_no_capture`), or capture
    its combined standard output and error (`run_capture`).

"""
import logging
import os
import shlex
import subprocess

import ephemeral_gpg.exceptions
import ephemeral_gpg.settings
import ephemeral_gpg.tmp
from ephemeral_gpg.formats import _check_path

# Inherits from ephemeral_gpg base logger (c.f. ephemeral_gpg.log)
LOG = logging.getLogger(__name__)

# Options whose value must not show up in logs or error messages
SECRET_OPTIONS = ["--passphrase"]
REDACTED = "********"


def _redact(fragments):
    redacted = list(fragments)
    for idx, fragment in enumerate(redacted[:-1]):
        if fragment in SECRET_OPTIONS:
            redacted[idx + 1] = REDACTED

    return redacted


def _split_lines(output):
    # Only "\n" ends a line, other line boundaries may be part of a user id
    lines = output.split("\n")
    if lines[-1] == "":
        lines.pop()

    return [line.rstrip("\r") for line in lines]


def build_command_line(home_dir, *args, redact=False):
    """
    <Purpose>
      Build a shell command line that invokes gpg (see
      `ephemeral_gpg.settings.GPG_COMMAND`) with the passed home directory,
      without its default keyring, and with the passed arguments.

      Each fragment of the command line is escaped with `shlex.quote`, i.e.
      arguments containing spaces, quotes or other shell metacharacters are
      passed to gpg verbatim.

    <Arguments>
      home_dir:
              Path to the gpg home directory passed as `--homedir`.

      *args:
              Further gpg arguments. (str or os.PathLike)

      redact: (default False)
              If True the values of SECRET_OPTIONS are replaced, e.g. to log
              the command line.

    <Exceptions>
      securesystemslib.exceptions.FormatError:
              If an argument is not a str or path.

    <Returns>
      The command line. (str)

    """
    _check_path(home_dir)
    for arg in args:
        _check_path(arg)

    fragments = shlex.split(ephemeral_gpg.settings.GPG_COMMAND)
    fragments += ["--homedir", os.fspath(home_dir), "--no-default-keyring"]
    fragments += [os.fspath(arg) for arg in args]

    if redact:
        fragments = _redact(fragments)

    return " ".join(shlex.quote(fragment) for fragment in fragments)


def run(command_line, timeout=None, **kwargs):
    """
    <Purpose>
      Provide wrapper for `subprocess.run` that executes the passed command
      line in a shell, where:

      * `timeout` defaults to `ephemeral_gpg.settings.SUBPROCESS_TIMEOUT`,
      * the return code is not checked, see `run_capture` and
        `run_no_capture` for that.

    <Arguments>
      command_line:
              A shell command line, e.g. as returned by `build_command_line`.

      timeout: (optional)
              Seconds after which the process is killed.

      **kwargs:
              See subprocess.run for available kwargs.

    <Exceptions>
      subprocess.TimeoutExpired:
              If the process does not terminate after timeout seconds.

    <Returns>
      A subprocess.CompletedProcess instance.

    """
    if timeout is None:
        timeout = ephemeral_gpg.settings.SUBPROCESS_TIMEOUT

    # A command line built with `build_command_line` is escaped per fragment
    return subprocess.run(  # nosec pylint: disable=subprocess-run-check
        command_line, shell=True, timeout=timeout, **kwargs
    )


def run_no_capture(*args, home_dir=None):
    """
    <Purpose>
      Run gpg with the passed arguments in an ephemeral home directory. The
      standard streams are inherited from the calling process, which allows
      gpg to prompt for a passphrase.

    <Arguments>
      *args:
              gpg arguments. (str or os.PathLike)

      home_dir: (optional)
              Directory in which the ephemeral home directory is created. See
              `ephemeral_gpg.tmp.get_temp_home_base` for the default.

    <Exceptions>
      ephemeral_gpg.exceptions.CommandError:
              If gpg exits with a non-zero return code.

      securesystemslib.exceptions.FormatError:
              If an argument is not a str or path.

    <Side Effects>
      The side effects of executing gpg.

    <Returns>
      None.

    """
    with ephemeral_gpg.tmp.temporary_home_dir(home_dir) as gpg_home:
        command_line = build_command_line(gpg_home, *args)
        log_command_line = build_command_line(gpg_home, *args, redact=True)
        LOG.debug("Running gpg command: {}".format(log_command_line))

        proc = run(command_line)
        if proc.returncode != 0:
            raise ephemeral_gpg.exceptions.CommandError(
                log_command_line, proc.returncode
            )


def run_capture(*args, home_dir=None):
    """
    <Purpose>
      Run gpg with the passed arguments in an ephemeral home directory and
      return what it printed.

      Standard output and standard error are redirected to the same
      temporary file, i.e. the returned lines are in the order gpg printed
      them, regardless of the stream.

    <Arguments>
      *args:
              gpg arguments. (str or os.PathLike)

      home_dir: (optional)
              Directory in which the ephemeral home directory is created. See
              `ephemeral_gpg.tmp.get_temp_home_base` for the default.

    <Exceptions>
      ephemeral_gpg.exceptions.CommandError:
              If gpg exits with a non-zero return code. The exception message
              contains the captured output.

      securesystemslib.exceptions.FormatError:
              If an argument is not a str or path.

    <Side Effects>
      The side effects of executing gpg.

    <Returns>
      A list of output lines without line endings.

    """
    with ephemeral_gpg.tmp.temporary_home_dir(home_dir) as gpg_home:
        command_line = build_command_line(gpg_home, *args)
        log_command_line = build_command_line(gpg_home, *args, redact=True)
        LOG.debug("Running gpg command: {}".format(log_command_line))

        with ephemeral_gpg.tmp.temporary_output_file() as output_path:
            with open(output_path, "w") as output_file:
                proc = run(
                    command_line,
                    stdout=output_file,
                    stderr=subprocess.STDOUT,
                )

            with open(output_path, errors="replace") as output_file:
                output = output_file.read()

    if proc.returncode != 0:
        raise ephemeral_gpg.exceptions.CommandError(
            log_command_line, proc.returncode, output
        )

    return _split_lines(output)
