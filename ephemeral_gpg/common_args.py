# Copyright the ephemeral-gpg contributors
# SPDX-License-Identifier: Apache-2.0

"""
<Program Name>
  common_args.py

<Started>
  April 2, 2014

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Provides a collection of constants that can be used as `*args` or `**kwargs`
  to argparse.ArgumentParser.add_argument() for cli tools with common
  command line arguments.

  Example Usage:

  ```
  from ephemeral_gpg.common_args import VERBOSE_ARGS, VERBOSE_KWARGS
  parser = argparse.ArgumentParser()
  parser.add_argument(*VERBOSE_ARGS, **VERBOSE_KWARGS)
  ```

"""
import sys

# argparse renamed the default group of optional arguments in Python 3.10
if sys.version_info >= (3, 10):
    OPTS_TITLE = "Options"
else:  # pragma: no cover
    OPTS_TITLE = "Optional Arguments"

PUBLIC_KEY_ARGS = ["-k", "--public-key"]
PUBLIC_KEY_KWARGS = {
    "dest": "public_key",
    "type": str,
    "required": True,
    "metavar": "<path>",
    "help": "path to a public key file, e.g. written by ephemeral-gpg-keygen.",
}

SECRET_KEY_ARGS = ["-s", "--secret-key"]
SECRET_KEY_KWARGS = {
    "dest": "secret_key",
    "type": str,
    "required": True,
    "metavar": "<path>",
    "help": "path to a secret key file, e.g. written by ephemeral-gpg-keygen.",
}

HOME_BASE_ARGS = ["--home-base"]
HOME_BASE_KWARGS = {
    "dest": "home_base",
    "type": str,
    "metavar": "<path>",
    "help": (
        "directory in which temporary gpg home directories are created."
        " Default is the user's home directory."
    ),
}

PASSPHRASE_ARGS = ["-P", "--passphrase"]
PASSPHRASE_KWARGS = {
    "nargs": "?",
    "const": True,
    "metavar": "<passphrase>",
    "help": (
        "passphrase of the secret key specified with '--secret-key'. Passing"
        " '-P' without <passphrase> opens a prompt. If no passphrase is"
        " passed, gpg asks for it, if the key is protected. NOTE: The"
        " passphrase is passed to gpg as command line argument."
    ),
}


def parse_passphrase_and_prompt_args(args):
    """Parse -P/--passphrase optional arg (nargs=?, const=True)."""
    # -P was provided without argument (True)
    if args.passphrase is True:
        passphrase = None
        prompt = True
    # -P was not provided (None), or provided with argument (<passphrase>)
    else:
        passphrase = args.passphrase
        prompt = False

    return passphrase, prompt


VERBOSE_ARGS = ["-v", "--verbose"]
VERBOSE_KWARGS = {
    "dest": "verbose",
    "action": "store_true",
    "help": "show more output",
}

QUIET_ARGS = ["-q", "--quiet"]
QUIET_KWARGS = {
    "dest": "quiet",
    "action": "store_true",
    "help": "suppress all output",
}


def title_case_action_groups(parser):
    """Capitalize the first character of all words in the title of each action
    group of the passed parser.

    """
    for action_group in parser._action_groups:  # pylint: disable=protected-access
        action_group.title = action_group.title.title()


def sort_action_groups(parser, title_order=None):
    """Sort action groups of passed parser by their titles according to the
    passed (or a default) order.

    """
    if title_order is None:
        title_order = [
            "Required Named Arguments",
            "Positional Arguments",
            OPTS_TITLE,
        ]

    action_group_dict = {}
    for action_group in parser._action_groups:  # pylint: disable=protected-access
        action_group_dict[action_group.title] = action_group

    ordered_action_groups = []
    for title in title_order:
        ordered_action_groups.append(action_group_dict[title])

    parser._action_groups = (  # pylint: disable=protected-access
        ordered_action_groups
    )
