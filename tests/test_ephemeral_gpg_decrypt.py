#!/usr/bin/env python

# Copyright the ephemeral-gpg contributors
# SPDX-License-Identifier: Apache-2.0

"""
<Program Name>
  test_ephemeral_gpg_decrypt.py

<Started>
  April 4, 2014

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Test ephemeral_gpg_decrypt command line tool.

"""
import logging
import os
import unittest
from unittest.mock import patch

from ephemeral_gpg.ephemeral_gpg_decrypt import main as decrypt_main
from ephemeral_gpg.functions import encrypt_file, generate_key_pair
import tests.common
from tests.common import FakeGpgMixin


class TestDecryptTool(FakeGpgMixin, tests.common.CliTestCase):
    """Test ephemeral_gpg_decrypt's main()."""

    cli_main_func = staticmethod(decrypt_main)

    @classmethod
    def setUpClass(cls):
        cls.set_up_fake_gpg()
        with patch.dict(os.environ, {"FAKE_GPG_PASSPHRASE": "s3cret"}):
            generate_key_pair("alice", "alice@example.com", "Alice")

        with open("plain.txt", "w") as plain_file:
            plain_file.write("plain")
        encrypt_file("alice.pub", "plain.txt", "plain.asc")

    @classmethod
    def tearDownClass(cls):
        cls.tear_down_fake_gpg()

    def setUp(self):
        self.log_level = logging.getLogger("ephemeral_gpg").level
        if os.path.exists("out.txt"):
            os.remove("out.txt")

    def tearDown(self):
        logging.getLogger("ephemeral_gpg").setLevel(self.log_level)

    def _assert_decrypted(self):
        with open("out.txt") as decrypted_file:
            self.assertEqual(decrypted_file.read(), "plain")

    def test_main_passphrase_arg(self):
        self.assert_cli_sys_exit(
            ["-k", "alice.pub", "-s", "alice.sec", "-P", "s3cret", "plain.asc",
             "out.txt"], 0)
        self._assert_decrypted()
        self.assert_no_leftovers()

    def test_main_passphrase_prompt(self):
        with patch("getpass.getpass", return_value="s3cret") as mock_getpass:
            self.assert_cli_sys_exit(
                ["--public-key", "alice.pub", "--secret-key", "alice.sec",
                 "plain.asc", "out.txt", "--passphrase"], 0)

        mock_getpass.assert_called_once()
        self._assert_decrypted()

    def test_main_wrong_passphrase(self):
        self.assert_cli_sys_exit(
            ["-k", "alice.pub", "-s", "alice.sec", "-P", "wrong", "plain.asc",
             "out.txt"], 1)
        self.assert_cli_sys_exit(
            ["-k", "alice.pub", "-s", "alice.sec", "plain.asc", "out.txt"], 1)
        self.assertFalse(os.path.exists("out.txt"))
        self.assert_no_leftovers()

    def test_main_wrong_args(self):
        for wrong_args in [
            [],
            ["-k", "alice.pub", "plain.asc", "out.txt"],
            ["-s", "alice.sec", "plain.asc", "out.txt"],
            ["-k", "alice.pub", "-s", "alice.sec", "plain.asc"],
        ]:
            self.assert_cli_sys_exit(wrong_args, 2)

    def test_main_missing_files(self):
        self.assert_cli_sys_exit(
            ["-k", "alice.pub", "-s", "missing.sec", "plain.asc", "out.txt"], 1)


if __name__ == "__main__":
    unittest.main()
