#!/usr/bin/env python

# Copyright the ephemeral-gpg contributors
# SPDX-License-Identifier: Apache-2.0

"""
<Program Name>
  common.py

<Started>
  April 3, 2014

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Common code for ephemeral-gpg unittests, import like so:
  `import tests.common`

  Tests importing this module, should be run from the project root, e.g.:
  `python -m unittest tests.test_functions`
  or using the aggregator script (preferred way):
  `python tests/runtests.py`.

"""
import inspect
import json
import os
import shlex
import shutil
import sys
import tempfile
import unittest
from unittest.mock import patch

import ephemeral_gpg.settings

FAKE_GPG = os.path.join(
    os.path.dirname(os.path.realpath(__file__)), "scripts", "fake_gpg.py"
)
FAKE_GPG_COMMAND = " ".join(shlex.quote(part) for part in [sys.executable, FAKE_GPG])


class TmpDirMixin:
    """Mixin with classmethods to create and change into a temporary directory,
    and to change back to the original CWD and remove the temporary directory.

    """

    @classmethod
    def set_up_test_dir(cls):
        """Back up CWD, and create and change into temporary directory."""
        cls.original_cwd = os.getcwd()
        cls.test_dir = os.path.realpath(tempfile.mkdtemp())
        os.chdir(cls.test_dir)

    @classmethod
    def tear_down_test_dir(cls):
        """Change back to original CWD and remove temporary directory."""
        os.chdir(cls.original_cwd)
        shutil.rmtree(cls.test_dir)


class FakeGpgMixin(TmpDirMixin):
    """Mixin with classmethods to run ephemeral_gpg against the fake gpg in
    `tests/scripts`, with its temporary files and ephemeral home directories
    inside the test directory, and test helpers to inspect the fake gpg calls
    and leftover temporary files.

    """

    PATCHED_SETTINGS = ["GPG_COMMAND", "TEMP_DIR", "TEMP_HOME_BASE"]

    @classmethod
    def set_up_fake_gpg(cls):
        """Create test dir and point settings to fake gpg and test dirs."""
        cls.set_up_test_dir()

        cls.settings_backup = {}
        for name in cls.PATCHED_SETTINGS:
            cls.settings_backup[name] = getattr(ephemeral_gpg.settings, name)

        cls.temp_dir = os.path.join(cls.test_dir, "tmp")
        cls.home_base = os.path.join(cls.test_dir, "home")
        os.mkdir(cls.temp_dir)
        os.mkdir(cls.home_base)

        ephemeral_gpg.settings.GPG_COMMAND = FAKE_GPG_COMMAND
        ephemeral_gpg.settings.TEMP_DIR = cls.temp_dir
        ephemeral_gpg.settings.TEMP_HOME_BASE = cls.home_base

        cls.gpg_log = os.path.join(cls.test_dir, "fake_gpg.log")
        cls.env_patcher = patch.dict(os.environ, {"FAKE_GPG_LOG": cls.gpg_log})
        cls.env_patcher.start()

    @classmethod
    def tear_down_fake_gpg(cls):
        """Restore settings and environment and remove test dir."""
        cls.env_patcher.stop()
        for name, value in cls.settings_backup.items():
            setattr(ephemeral_gpg.settings, name, value)

        cls.tear_down_test_dir()

    def clear_gpg_calls(self):
        if os.path.exists(self.gpg_log):
            os.remove(self.gpg_log)

    def get_gpg_calls(self):
        """Return list of dicts with "args" and "homedir_exists" of each call of
        the fake gpg since the last `clear_gpg_calls`."""
        if not os.path.exists(self.gpg_log):
            return []

        with open(self.gpg_log) as log_file:
            return [json.loads(line) for line in log_file]

    def assert_no_leftovers(self):
        """Assert that no temporary file or home directory is left."""
        self.assertListEqual(os.listdir(self.temp_dir), [])
        self.assertListEqual(os.listdir(self.home_base), [])


class CliTestCase(unittest.TestCase):
    """TestCase subclass providing a test helper that patches sys.argv with
    passed arguments and asserts a SystemExit with a return code equal
    to the passed status argument.

    Subclasses of CliTestCase require a class variable that stores the main
    function of the cli tool to test as staticmethod, e.g.:

    ```
    import tests.common
    from ephemeral_gpg.ephemeral_gpg_encrypt import main as encrypt_main

    class TestEncryptTool(tests.common.CliTestCase):
        cli_main_func = staticmethod(encrypt_main)
        ...

    ```
    """

    cli_main_func = None

    def __init__(self, *args, **kwargs):
        """Constructor that checks for the presence of a callable cli_main_func
        class variable. And stores the filename of the module containing that
        function, to be used as first argument when patching sys.argv in
        self.assert_cli_sys_exit.
        """
        if not callable(self.cli_main_func):
            raise Exception(
                "Subclasses of `CliTestCase` need to assign the main"
                " function of the cli tool to test using `staticmethod()`: {}".format(
                    self.__class__.__name__
                )
            )

        file_path = inspect.getmodule(self.cli_main_func).__file__
        self.file_name = os.path.basename(file_path)

        super().__init__(*args, **kwargs)

    def assert_cli_sys_exit(self, cli_args, status):
        """Test helper to mock command line call and assert return value.
        The passed args does not need to contain the command line tool's name.
        This is assessed from  `self.cli_main_func`
        """
        with patch.object(
            sys, "argv", [self.file_name] + cli_args
        ), self.assertRaises(SystemExit) as raise_ctx:
            self.cli_main_func()  # pylint: disable=not-callable

        self.assertEqual(raise_ctx.exception.code, status)
