#!/usr/bin/env python

# Copyright the ephemeral-gpg contributors
# SPDX-License-Identifier: Apache-2.0

"""
<Program Name>
  ephemeral_gpg_decrypt.py

<Started>
  April 2, 2014

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  A CLI tool for decrypting a file with the key pair in a public and a secret
  key file, without importing the keys into the user's keyrings.

<Return Codes>
  2 if an exception occurred during argument parsing
  1 if an exception occurred
  0 if no exception occurred

"""
import argparse
import getpass
import logging
import sys

from ephemeral_gpg import __version__, user_settings
from ephemeral_gpg.common_args import (
    HOME_BASE_ARGS,
    HOME_BASE_KWARGS,
    PASSPHRASE_ARGS,
    PASSPHRASE_KWARGS,
    PUBLIC_KEY_ARGS,
    PUBLIC_KEY_KWARGS,
    QUIET_ARGS,
    QUIET_KWARGS,
    SECRET_KEY_ARGS,
    SECRET_KEY_KWARGS,
    VERBOSE_ARGS,
    VERBOSE_KWARGS,
    parse_passphrase_and_prompt_args,
    sort_action_groups,
    title_case_action_groups,
)
from ephemeral_gpg.functions import decrypt_file

# Command line interfaces should use ephemeral_gpg base logger
# (c.f. ephemeral_gpg.log)
LOG = logging.getLogger("ephemeral_gpg")


def create_parser():
    """Create parser."""
    parser = argparse.ArgumentParser(
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=(
            "ephemeral-gpg-decrypt decrypts a file with the key pair in the"
            " passed public and secret key files and writes the result to the"
            " output path. An existing output file is overwritten."
        ),
    )

    parser.epilog = """EXAMPLE USAGE

Decrypt 'plain.txt.asc' with the key pair 'alice.pub' and 'alice.sec', and
prompt for the passphrase of the secret key.

  ephemeral-gpg-decrypt -k alice.pub -s alice.sec -P plain.txt.asc plain.txt

"""

    required = parser.add_argument_group("required named arguments")
    required.add_argument(*PUBLIC_KEY_ARGS, **PUBLIC_KEY_KWARGS)
    required.add_argument(*SECRET_KEY_ARGS, **SECRET_KEY_KWARGS)

    parser.add_argument(
        "input", type=str, metavar="<input>", help="path to the file to decrypt."
    )
    parser.add_argument(
        "output",
        type=str,
        metavar="<output>",
        help="path to write the decrypted file to.",
    )

    parser.add_argument(*PASSPHRASE_ARGS, **PASSPHRASE_KWARGS)
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
    """Parse arguments, load user settings and decrypt the file."""
    parser = create_parser()
    args = parser.parse_args()

    LOG.setLevelVerboseOrQuiet(args.verbose, args.quiet)

    passphrase, prompt = parse_passphrase_and_prompt_args(args)

    try:
        user_settings.set_settings()
        if prompt:
            passphrase = getpass.getpass(
                "Enter passphrase for '{}': ".format(args.secret_key)
            )

        decrypt_file(
            args.public_key,
            args.secret_key,
            args.input,
            args.output,
            passphrase=passphrase,
            home_dir=args.home_base,
        )

    except Exception as e:  # pylint: disable=broad-except
        LOG.error(
            "(ephemeral-gpg-decrypt) {0}: {1}".format(type(e).__name__, e)
        )
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
