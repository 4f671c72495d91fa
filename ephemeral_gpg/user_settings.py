# Copyright the ephemeral-gpg contributors
# SPDX-License-Identifier: Apache-2.0

"""
<Program Name>
  user_settings.py

<Started>
  April 2, 2014

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Provides methods to parse environment variables (`get_env`) and RCfiles
  (`get_rc`) and to override default settings (`set_settings`) defined in the
  `ephemeral_gpg.settings` module.

  Check out the respective docstrings to learn about the requirements for
  environment variables and RCfiles (includes examples).

"""
import configparser
import logging
import os

import ephemeral_gpg.settings

# Inherits from ephemeral_gpg base logger (c.f. ephemeral_gpg.log)
LOG = logging.getLogger(__name__)


USER_PATH = os.path.expanduser("~")

# Prefix required by environment variables to be considered as settings
ENV_PREFIX = "EPHEMERAL_GPG_"

# List of considered rcfile paths in the order they get parsed and overridden,
# i.e. the same setting in `/etc/ephemeral_gpg/config` and `.ephemeral_gpgrc`
# (cwd) uses the latter
RC_PATHS = [
    os.path.join("/etc", "ephemeral_gpg", "config"),
    os.path.join(USER_PATH, ".config", "ephemeral_gpg", "config"),
    os.path.join(USER_PATH, ".ephemeral_gpgrc"),
    ".ephemeral_gpgrc",
]

# Settings, for which defaults exist in `settings.py`, mapped to a function
# that converts the parsed string value
EPHEMERAL_GPG_SETTINGS = {
    "GPG_COMMAND": str,
    "TEMP_HOME_BASE": str,
    "TEMP_DIR": str,
    "SUBPROCESS_TIMEOUT": float,
    "KEY_LISTING_FORMAT": str,
    "KEY_TYPE": str,
    "KEY_LENGTH": int,
    "SUBKEY_TYPE": str,
    "SUBKEY_LENGTH": int,
    "EXPIRE_DATE": str,
}


def get_env():
    """
    <Purpose>
      Parse environment for variables with prefix `ENV_PREFIX` and return
      a dict of key-value pairs.

      The prefix `ENV_PREFIX` is stripped from the keys in the returned dict.

      Example:

      ```
      # Exporting variables in e.g. bash
      export EPHEMERAL_GPG_GPG_COMMAND='gpg1'
      export EPHEMERAL_GPG_SUBPROCESS_TIMEOUT='30'
      ```

      produces

      ```
      {
        "GPG_COMMAND": "gpg1",
        "SUBPROCESS_TIMEOUT": "30"
      }
      ```

    <Exceptions>
      None.

    <Returns>
      A dictionary containing the parsed key-value pairs.

    """
    env_dict = {}

    for name, value in os.environ.items():
        if name.startswith(ENV_PREFIX) and len(name) > len(ENV_PREFIX):
            env_dict[name[len(ENV_PREFIX) :]] = value

    return env_dict


def get_rc():
    """
    <Purpose>
      Reads RCfiles from the paths defined in `RC_PATHS` and returns
      a dictionary with all parsed key-value pairs.

      The RCfile format is as expected by Python's builtin `ConfigParser`.
      Section titles are ignored when parsing the key-value pairs. However,
      there has to be at least one section defined.

      The paths in `RC_PATHS` are ordered in reverse precedence, i.e. each
      file's settings override a previous file's settings.

      Example:

      ```
      # E.g. file `.ephemeral_gpgrc` in current working directory
      [ephemeral-gpg setting]
      GPG_COMMAND = gpg1
      KEY_LISTING_FORMAT = colons
      ```

      produces

      ```
      {
        "GPG_COMMAND": "gpg1",
        "KEY_LISTING_FORMAT": "colons"
      }
      ```

    <Exceptions>
      None.

    <Side Effects>
      Reads files from disk.

    <Returns>
      A dictionary containing the parsed key-value pairs.

    """
    rc_dict = {}

    config = configparser.ConfigParser()
    # Reset `optionxform`'s default case conversion to enable case-sensitivity
    config.optionxform = str
    config.read(RC_PATHS)

    for section in config.sections():
        for name, value in config.items(section):
            rc_dict[name] = value

    return rc_dict


def set_settings():
    """
    <Purpose>
      Calls functions that read environment variables and RCfiles and
      overrides variables in `settings.py` with the retrieved values, if they
      are listed in `EPHEMERAL_GPG_SETTINGS`.

      Settings defined in RCfiles take precedence over settings defined in
      environment variables.

    <Exceptions>
      ValueError:
              If a numeric setting cannot be converted.

    <Side Effects>
      Calls functions that read environment variables and files from disk.

    <Returns>
      None.

    """
    user_settings = get_env()
    user_settings.update(get_rc())

    for setting, convert in EPHEMERAL_GPG_SETTINGS.items():
        user_setting = user_settings.get(setting)
        if user_setting:
            LOG.info("Setting (user): {0}={1}".format(setting, user_setting))
            setattr(ephemeral_gpg.settings, setting, convert(user_setting))

        else:
            default_setting = getattr(ephemeral_gpg.settings, setting)
            LOG.info(
                "Setting (default): {0}={1}".format(setting, default_setting)
            )
