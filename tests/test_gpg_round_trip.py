#!/usr/bin/env python

# Copyright the ephemeral-gpg contributors
# SPDX-License-Identifier: Apache-2.0

"""
<Program Name>
  test_gpg_round_trip.py

<Started>
  April 4, 2014

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Generate a key pair and encrypt and decrypt a file with the gpg installed
  on the system. Skipped, if no gpg with separate secret keyring support is
  found.

"""
import os
import shlex
import shutil
import unittest

import ephemeral_gpg.settings
from ephemeral_gpg.exceptions import CommandError, InvalidOutputError
from ephemeral_gpg.functions import decrypt_file, encrypt_file, generate_key_pair
from ephemeral_gpg.util import is_version_supported
from tests.common import TmpDirMixin


def have_supported_gpg():
    """Return True, if the configured gpg is installed and below 2.1."""
    command = shlex.split(ephemeral_gpg.settings.GPG_COMMAND)[0]
    if os.getenv("TEST_SKIP_GPG") or shutil.which(command) is None:
        return False

    try:
        return is_version_supported()

    except (CommandError, InvalidOutputError, OSError):
        return False


@unittest.skipIf(not have_supported_gpg(), "gpg 1.x not found")
class TestGpgRoundTrip(unittest.TestCase, TmpDirMixin):
    """Test the documented key generation and encryption scenario."""

    @classmethod
    def setUpClass(cls):
        cls.set_up_test_dir()
        cls.temp_home_base = ephemeral_gpg.settings.TEMP_HOME_BASE
        ephemeral_gpg.settings.TEMP_HOME_BASE = cls.test_dir

    @classmethod
    def tearDownClass(cls):
        ephemeral_gpg.settings.TEMP_HOME_BASE = cls.temp_home_base
        cls.tear_down_test_dir()

    def test_round_trip(self):
        with open("plain.txt", "wb") as plain_file:
            plain_file.write(os.urandom(1024))

        generate_key_pair("testkey", "a@b.com", "A B")
        self.assertTrue(os.path.exists("testkey.pub"))
        self.assertTrue(os.path.exists("testkey.sec"))

        encrypt_file("testkey.pub", "plain.txt", "out.asc")
        with open("out.asc") as encrypted_file:
            self.assertTrue(
                encrypted_file.read().startswith("-----BEGIN PGP MESSAGE-----")
            )

        decrypt_file("testkey.pub", "testkey.sec", "out.asc", "roundtrip.txt")
        with open("plain.txt", "rb") as plain_file, open(
            "roundtrip.txt", "rb"
        ) as decrypted_file:
            self.assertEqual(plain_file.read(), decrypted_file.read())

        leftovers = [
            name
            for name in os.listdir(self.test_dir)
            if name.startswith(ephemeral_gpg.settings.TEMP_HOME_PREFIX)
        ]
        self.assertListEqual(leftovers, [])


if __name__ == "__main__":
    unittest.main()
