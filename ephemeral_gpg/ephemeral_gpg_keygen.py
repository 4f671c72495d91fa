#!/usr/bin/env python

# Copyright the ephemeral-gpg contributors
# SPDX-License-Identifier: Apache-2.0

"""
<Program Name>
  ephemeral_gpg_keygen.py

<Started>
  April 2, 2014

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  A CLI tool for generating a gpg key pair without touching the user's
  keyrings. The keys are written to '<base name>.pub' (public key) and
  '<base name>.sec' (secret key).

<Return Codes>
  2 if an exception occurred during argument parsing
  1 if an exception occurred
  0 if no exception occurred

"""
import argparse
import logging
import sys

from ephemeral_gpg import __version__, user_settings
from ephemeral_gpg.common_args import (
    HOME_BASE_ARGS,
    HOME_BASE_KWARGS,
    QUIET_ARGS,
    QUIET_KWARGS,
    VERBOSE_ARGS,
    VERBOSE_KWARGS,
    sort_action_groups,
    title_case_action_groups,
)
from ephemeral_gpg.functions import generate_key_pair

# Command line interfaces should use ephemeral_gpg base logger
# (c.f. ephemeral_gpg.log)
LOG = logging.getLogger("ephemeral_gpg")


def create_parser():
    """Create parser."""
    parser = argparse.ArgumentParser(
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=(
            "ephemeral-gpg-keygen generates a gpg key pair in a temporary gpg"
            " home directory and writes it to '<base name>.pub' (public key)"
            " and '<base name>.sec' (secret key). gpg may prompt for a"
            " passphrase to protect the secret key."
        ),
    )

    parser.epilog = """EXAMPLE USAGE

Generate a key pair for 'alice@example.com' and write 'alice.pub' and
'alice.sec' to the current working directory.

  ephemeral-gpg-keygen -r alice@example.com -n "Alice Doe" alice

"""

    required = parser.add_argument_group("required named arguments")
    required.add_argument(
        "-r",
        "--recipient",
        type=str,
        required=True,
        metavar="<email>",
        help="email address of the key, used to select it for encryption.",
    )
    required.add_argument(
        "-n",
        "--name",
        type=str,
        required=True,
        metavar="<name>",
        help="real name of the key owner.",
    )

    parser.add_argument(
        "base_name",
        type=str,
        metavar="<base name>",
        help="path prefix of the resulting key files.",
    )

    parser.add_argument(*HOME_BASE_ARGS, **HOME_BASE_KWARGS)

    verbosity_args = parser.add_mutually_exclusive_group(required=False)
    verbosity_args.add_argument(*VERBOSE_ARGS, **VERBOSE_KWARGS)
    verbosity_args.add_argument(*QUIET_ARGS, **QUIET_KWARGS)

    parser.add_argument(
        "--version",
        action="version",
        version="{} {}".format(parser.prog, __version__),
    )

    title_case_action_groups(parser)
    sort_action_groups(parser)

    return parser


def main():
    """Parse arguments, load user settings and generate the key pair."""
    parser = create_parser()
    args = parser.parse_args()

    LOG.setLevelVerboseOrQuiet(args.verbose, args.quiet)

    try:
        user_settings.set_settings()
        generate_key_pair(
            args.base_name, args.recipient, args.name, home_dir=args.home_base
        )

    except Exception as e:  # pylint: disable=broad-except
        LOG.error("(ephemeral-gpg-keygen) {0}: {1}".format(type(e).__name__, e))
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
