# Copyright the ephemeral-gpg contributors
# SPDX-License-Identifier: Apache-2.0

"""
<Program Name>
  util.py

<Started>
  April 2, 2014

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Helpers to query the version of the configured gpg.

"""
import logging
import re

import ephemeral_gpg.exceptions
import ephemeral_gpg.process

# Inherits from ephemeral_gpg base logger (c.f. ephemeral_gpg.log)
LOG = logging.getLogger(__name__)

# Since 2.1 gpg ignores '%secring' in batch scripts and '--secret-keyring',
# secret keys are kept by gpg-agent in the home directory instead.
UNSUPPORTED_MIN_VERSION = (2, 1)

VERSION_PATTERN = re.compile(r"^gpg \(GnuPG[^)]*\) (?P<version>\d+(\.\d+)*)")


def _version_tuple(version):
    return tuple(int(part) for part in version.split("."))


def get_version(home_dir=None):
    """
    <Purpose>
      Uses `gpg --version` to get the version info of the installed gpg
      and extracts and returns the version number.

    <Exceptions>
      ephemeral_gpg.exceptions.CommandError:
              If gpg fails or is not installed.

      ephemeral_gpg.exceptions.InvalidOutputError:
              If the version cannot be found in the output.

    <Returns>
      Version number string, e.g. "1.4.23"

    """
    lines = ephemeral_gpg.process.run_capture("--version", home_dir=home_dir)
    for line in lines:
        match = VERSION_PATTERN.match(line)
        if match:
            return match.group("version")

    raise ephemeral_gpg.exceptions.InvalidOutputError("Invalid output")


def is_version_supported(home_dir=None):
    """
    <Purpose>
      Compares the version of the installed gpg with the first version that
      dropped separate secret keyrings, which key generation and decryption
      rely on.

    <Returns>
      True if the version is supported, False otherwise.

    """
    version = get_version(home_dir=home_dir)
    supported = _version_tuple(version) < UNSUPPORTED_MIN_VERSION
    if not supported:
        LOG.debug(
            "gpg {} does not support separate secret keyrings".format(version)
        )

    return supported
