# Copyright the ephemeral-gpg contributors
# SPDX-License-Identifier: Apache-2.0

"""
<Program Name>
  settings.py

<Started>
  March 3, 2014

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  A central place to define default settings that can be used throughout the
  package.

  Defaults can be changed,
   - here (hardcoded),
   - programmatically, e.g.
     ```
     import ephemeral_gpg.settings
     ephemeral_gpg.settings.GPG_COMMAND = "/usr/local/bin/gpg1"
     ```
   - or, when using ephemeral-gpg via command line tooling, with environment
     variables or RCfiles, see the `ephemeral_gpg.user_settings` module

"""
# The debug setting is used to set the ephemeral_gpg base logger to
# logging.DEBUG
DEBUG = False

# Invocation name of the external OpenPGP tool. Split with shlex, so it may
# carry a wrapper, e.g. "firejail gpg".
GPG_COMMAND = "gpg"

# Directory in which ephemeral gpg home directories are created. If not set,
# the user's home directory ($HOME) is used.
TEMP_HOME_BASE = None
TEMP_HOME_PREFIX = ".ephemeral-gpg-tmp-"

# Directory for temporary keyrings, batch scripts and captured output. If not
# set the platform default temporary directory is used.
TEMP_DIR = None

# Timeout in seconds for a single gpg invocation. None waits forever.
SUBPROCESS_TIMEOUT = None

# Listing format used to resolve the recipient of a key file, one of "text"
# (human readable `gpg <keyfile>` output) or "colons" (`--with-colons`)
KEY_LISTING_FORMAT = "text"

# Key generation parameters written to the gpg batch script
KEY_TYPE = "DSA"
KEY_LENGTH = 1024
SUBKEY_TYPE = "ELG-E"
SUBKEY_LENGTH = 1024
EXPIRE_DATE = "0"
