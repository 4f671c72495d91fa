#!/usr/bin/env python

# Copyright the ephemeral-gpg contributors
# SPDX-License-Identifier: Apache-2.0

"""
<Program Name>
  test_user_settings.py

<Started>
  April 3, 2014

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Test ephemeral_gpg/user_settings.py

"""
import os
import unittest
from unittest.mock import patch

import ephemeral_gpg.settings
import ephemeral_gpg.user_settings
from tests.common import TmpDirMixin

RC_CONTENT = """\
[ephemeral-gpg setting]
GPG_COMMAND = gpg1 --quiet
KEY_LENGTH = 2048
SUBPROCESS_TIMEOUT = 2.5
"""


class TestUserSettings(unittest.TestCase, TmpDirMixin):
    @classmethod
    def setUpClass(cls):
        # Backup settings to restore them in `tearDownClass`
        cls.settings_backup = {}
        for key in ephemeral_gpg.user_settings.EPHEMERAL_GPG_SETTINGS:
            cls.settings_backup[key] = getattr(ephemeral_gpg.settings, key)

        # `.ephemeral_gpgrc` in CWD is loaded by `get_rc`
        cls.set_up_test_dir()
        with open(".ephemeral_gpgrc", "w") as rc_file:
            rc_file.write(RC_CONTENT)

        cls.env_patcher = patch.dict(
            os.environ,
            {
                "EPHEMERAL_GPG_GPG_COMMAND": "gpg-from-env",
                "EPHEMERAL_GPG_KEY_LISTING_FORMAT": "colons",
                "EPHEMERAL_GPG_NOT_LISTED": "parsed",
                "NOT_PARSED": "ignored",
            },
        )
        cls.env_patcher.start()

    @classmethod
    def tearDownClass(cls):
        cls.env_patcher.stop()
        cls.tear_down_test_dir()

        # Other unittests might depend on defaults
        for key, val in cls.settings_backup.items():
            setattr(ephemeral_gpg.settings, key, val)

    def test_get_env(self):
        """Test environment variables parsing, prefix stripping."""
        env_dict = ephemeral_gpg.user_settings.get_env()

        self.assertEqual(env_dict["GPG_COMMAND"], "gpg-from-env")
        self.assertEqual(env_dict["KEY_LISTING_FORMAT"], "colons")
        self.assertEqual(env_dict["NOT_LISTED"], "parsed")
        self.assertNotIn("NOT_PARSED", env_dict)

    def test_get_rc(self):
        """Test rcfile parsing in CWD."""
        rc_dict = ephemeral_gpg.user_settings.get_rc()

        self.assertEqual(rc_dict["GPG_COMMAND"], "gpg1 --quiet")
        self.assertEqual(rc_dict["KEY_LENGTH"], "2048")
        self.assertEqual(rc_dict["SUBPROCESS_TIMEOUT"], "2.5")

    def test_set_settings(self):
        """Test precedence of rc over env and type conversion."""
        ephemeral_gpg.user_settings.set_settings()

        # From rc file, overriding env
        self.assertEqual(ephemeral_gpg.settings.GPG_COMMAND, "gpg1 --quiet")
        self.assertEqual(ephemeral_gpg.settings.KEY_LENGTH, 2048)
        self.assertEqual(ephemeral_gpg.settings.SUBPROCESS_TIMEOUT, 2.5)

        # From env
        self.assertEqual(ephemeral_gpg.settings.KEY_LISTING_FORMAT, "colons")

        # Not listed settings are not set
        self.assertFalse(hasattr(ephemeral_gpg.settings, "NOT_LISTED"))

        # Defaults are kept
        self.assertEqual(ephemeral_gpg.settings.SUBKEY_LENGTH, 1024)


if __name__ == "__main__":
    unittest.main()
