# Copyright the ephemeral-gpg contributors
# SPDX-License-Identifier: Apache-2.0

"""
<Program Name>
  tmp.py

<Started>
  March 3, 2014

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Provide context managers for the short-lived files and directories used
  around a gpg invocation:

  - an ephemeral gpg home directory, so that gpg never touches the user's
    default keyrings or configuration,
  - a reserved path for a temporary keyring file, which gpg creates itself,
  - a closed batch script file, and
  - a closed file to capture gpg's output.

  All resources are removed when the `with` block is left, regardless of
  whether it is left normally or by an exception.

"""
import logging
import os
import tempfile
from contextlib import contextmanager

import ephemeral_gpg.settings

# Inherits from ephemeral_gpg base logger (c.f. ephemeral_gpg.log)
LOG = logging.getLogger(__name__)

KEYRING_PREFIX = "gpg-key-ring"
SCRIPT_PREFIX = "gpg-script"
OUTPUT_PREFIX = "gpg-output"

# Suffix of the backup copy some gpg versions write next to a keyring
KEYRING_BACKUP_SUFFIX = "~"


def get_temp_home_base(base_dir=None):
    """Return the directory in which ephemeral home directories are created.

    The passed `base_dir` takes precedence over
    `ephemeral_gpg.settings.TEMP_HOME_BASE`, which takes precedence over the
    `HOME` environment variable. If none is set, None is returned and the
    platform default temporary directory is used.

    """
    if base_dir is not None:
        return os.fspath(base_dir)

    if ephemeral_gpg.settings.TEMP_HOME_BASE is not None:
        return os.fspath(ephemeral_gpg.settings.TEMP_HOME_BASE)

    return os.environ.get("HOME")


@contextmanager
def temporary_home_dir(base_dir=None):
    """
    <Purpose>
      Create a uniquely named directory to be used as gpg home directory and
      remove it with all its contents on exit.

    <Arguments>
      base_dir: (optional)
              Directory in which the home directory is created. See
              `get_temp_home_base` for the default.

    <Exceptions>
      OSError:
              If the directory cannot be created.

    <Side Effects>
      Creates and removes a directory prefixed with
      `ephemeral_gpg.settings.TEMP_HOME_PREFIX`.

    <Returns>
      Yields the path to the created directory.

    """
    with tempfile.TemporaryDirectory(
        prefix=ephemeral_gpg.settings.TEMP_HOME_PREFIX,
        dir=get_temp_home_base(base_dir),
    ) as home_dir:
        LOG.debug("Created temporary gpg home '{}'".format(home_dir))
        yield home_dir

    LOG.debug("Removed temporary gpg home '{}'".format(home_dir))


@contextmanager
def temporary_keyring_file():
    """
    <Purpose>
      Reserve a unique path for a keyring file. The file is created and
      immediately removed again, so that gpg can create the keyring itself.

      On exit the keyring and its backup (path with trailing '~') are removed,
      if they exist.

    <Exceptions>
      OSError:
              If the file cannot be created or removed.

    <Returns>
      Yields the reserved path.

    """
    fd, keyring_path = tempfile.mkstemp(
        prefix=KEYRING_PREFIX, dir=ephemeral_gpg.settings.TEMP_DIR
    )
    os.close(fd)
    os.remove(keyring_path)

    try:
        yield keyring_path

    finally:
        for path in [keyring_path, keyring_path + KEYRING_BACKUP_SUFFIX]:
            if os.path.exists(path):
                os.remove(path)
                LOG.debug("Removed temporary keyring '{}'".format(path))


@contextmanager
def temporary_script_file(content):
    """Write `content` to a new temporary file, which is closed before its path
    is yielded, and removed on exit."""
    script_file = tempfile.NamedTemporaryFile(
        mode="w",
        prefix=SCRIPT_PREFIX,
        dir=ephemeral_gpg.settings.TEMP_DIR,
        delete=False,
    )
    try:
        with script_file:
            script_file.write(content)

        yield script_file.name

    finally:
        os.remove(script_file.name)


@contextmanager
def temporary_output_file():
    """Yield the path of a new, empty and closed temporary file, and remove it
    on exit."""
    fd, output_path = tempfile.mkstemp(
        prefix=OUTPUT_PREFIX, dir=ephemeral_gpg.settings.TEMP_DIR
    )
    os.close(fd)

    try:
        yield output_path

    finally:
        if os.path.exists(output_path):
            os.remove(output_path)
