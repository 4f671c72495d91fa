# Copyright the ephemeral-gpg contributors
# SPDX-License-Identifier: Apache-2.0

"""
<Program Name>
  functions.py

<Started>
  March 3, 2014

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Publicly-usable functions for generating key pairs and for encrypting and
  decrypting files with them.

  The keys are never imported into the user's keyrings. Each gpg call runs in
  an ephemeral home directory, and the keys needed for encryption or
  decryption are imported into temporary keyrings, which are removed
  afterwards.

"""
import contextlib
import logging
import os

import ephemeral_gpg.exceptions
import ephemeral_gpg.keylisting
import ephemeral_gpg.process
import ephemeral_gpg.settings
import ephemeral_gpg.tmp
from ephemeral_gpg.formats import (
    _check_email,
    _check_optional_str,
    _check_path,
    _check_script_value,
)

# Inherits from ephemeral_gpg base logger (c.f. ephemeral_gpg.log)
LOG = logging.getLogger(__name__)

PUBLIC_KEY_EXTENSION = ".pub"
PRIVATE_KEY_EXTENSION = ".sec"

KEY_COMMENT = "Key automatically generated by ephemeral-gpg"

GENERATE_KEY_SCRIPT = """\
%echo Generating a standard key
Key-Type: {key_type}
Key-Length: {key_length}
Subkey-Type: {subkey_type}
Subkey-Length: {subkey_length}
Name-Real: {real_name}
Name-Comment: {comment}
Name-Email: {recipient}
Expire-Date: {expire_date}
%pubring {public_key_file}
%secring {private_key_file}
# Do a commit here, so that we can later print "done"
%commit
%echo done
"""


def _check_files_exist(**files):
    """Raise MissingFileError for the first passed path that does not exist.
    Keyword names are used in the error message, e.g. `input_file` reads
    'Input file'."""
    for description, path in files.items():
        _check_path(path)
        if not os.path.exists(path):
            raise ephemeral_gpg.exceptions.MissingFileError(
                '{} "{}" does not exist'.format(
                    description.replace("_", " ").capitalize(), os.fspath(path)
                )
            )


def generate_key_script(
    public_key_file, private_key_file, recipient, real_name
):
    """
    <Purpose>
      Create a gpg batch script for unattended key generation, which writes
      the public and secret keyring to the passed paths.

      Key types and lengths are read from `ephemeral_gpg.settings`.

    <Arguments>
      public_key_file:
              Path gpg writes the public key to.

      private_key_file:
              Path gpg writes the secret key to.

      recipient:
              Email address of the key's user id.

      real_name:
              Name of the key's user id.

    <Exceptions>
      securesystemslib.exceptions.FormatError:
              If an argument does not fit into a single line of the script.

    <Returns>
      The batch script. (str)

    """
  
    _check_path(public_key_file)
    _check_path(private_key_file)
    _check_script_value(os.fspath(public_key_file))
    _check_script_value(os.fspath(private_key_file))
    _check_email(recipient)
    _check_script_value(real_name)

    return GENERATE_KEY_SCRIPT.format(
        key_type=ephemeral_gpg.settings.KEY_TYPE,
        key_length=ephemeral_gpg.settings.KEY_LENGTH,
        subkey_type=ephemeral_gpg.settings.SUBKEY_TYPE,
        subkey_length=ephemeral_gpg.settings.SUBKEY_LENGTH,
        real_name=real_name,
        comment=KEY_COMMENT,
        recipient=recipient,
        expire_date=ephemeral_gpg.settings.EXPIRE_DATE,
        public_key_file=os.fspath(public_key_file),
        private_key_file=os.fspath(private_key_file),
    )


def generate_key_pair(key_base_name, recipient, real_name, home_dir=None):
    """
    <Purpose>
      Call gpg in batch mode to generate a key pair, written to
      '<key_base_name>.pub' (public key) and '<key_base_name>.sec' (secret
      key).

      gpg may prompt for a passphrase to protect the secret key, hence it is
      run with the standard streams of the calling process.

    <Arguments>
      key_base_name:
              Path prefix of the key files. Relative paths are resolved
              against the current working directory.

      recipient:
              Email address of the key's user id, used as recipient in
              `encrypt_file`.

      real_name:
              Name of the key's user id.

      home_dir: (optional)
              Directory in which the ephemeral gpg home directory is created.

    <Exceptions>
      ephemeral_gpg.exceptions.CommandError:
              If gpg fails.

      securesystemslib.exceptions.FormatError:
              If the arguments are malformed.

    <Side Effects>
      Writes the key files.

    <Returns>
      None.

    """
    _check_path(key_base_name)

    public_key_file = os.fspath(key_base_name) + PUBLIC_KEY_EXTENSION
    private_key_file = os.fspath(key_base_name) + PRIVATE_KEY_EXTENSION

    script = generate_key_script(
        public_key_file, private_key_file, recipient, real_name
    )

    with ephemeral_gpg.tmp.temporary_script_file(script) as script_file:
        ephemeral_gpg.process.run_no_capture(
            "--batch", "--gen-key", script_file, home_dir=home_dir
        )

    LOG.info(
        "Generated key pair '{}' and '{}' for '{}'".format(
            public_key_file, private_key_file, recipient
        )
    )


@contextlib.contextmanager
def _temporary_encrypt_keyring(public_key_file, home_dir=None):
    """Yield a temporary keyring with the passed public key imported."""
    with ephemeral_gpg.tmp.temporary_keyring_file() as keyring_file:
        ephemeral_gpg.process.run_capture(
            "--keyring",
            keyring_file,
            "--import",
            public_key_file,
            home_dir=home_dir,
        )
        yield keyring_file


@contextlib.contextmanager
def _temporary_decrypt_keyrings(private_key_file, home_dir=None):
    """Yield a temporary public and secret keyring with the passed secret key
    imported."""
    with ephemeral_gpg.tmp.temporary_keyring_file() as keyring_file:
        with ephemeral_gpg.tmp.temporary_keyring_file() as secret_keyring_file:
            ephemeral_gpg.process.run_capture(
                "--keyring",
                keyring_file,
                "--secret-keyring",
                secret_keyring_file,
                "--import",
                private_key_file,
                home_dir=home_dir,
            )
            yield keyring_file, secret_keyring_file


def encrypt_file(public_key_file, input_file, output_file, home_dir=None):
    """
    <Purpose>
      Encrypt the input file for the key in the passed public key file and
      write the ASCII armored result to the output file, which is
      overwritten if it exists.

      The key is trusted unconditionally (`--trust-model always`).

    <Arguments>
      public_key_file:
              Path to the public key file, e.g. as written by
              `generate_key_pair`.

      input_file:
              Path to the file to encrypt.

      output_file:
              Path to write the encrypted file to.

      home_dir: (optional)
              Directory in which the ephemeral gpg home directories are
              created.

    <Exceptions>
      ephemeral_gpg.exceptions.MissingFileError:
              If the public key file or the input file does not exist. No gpg
              process is started in that case.

      ephemeral_gpg.exceptions.CommandError:
              If gpg fails.

      ephemeral_gpg.exceptions.InvalidOutputError:
              If the recipient cannot be read from the public key file.

      securesystemslib.exceptions.FormatError:
              If the arguments are malformed.

    <Side Effects>
      Writes the output file.

    <Returns>
      None.

    """
    _check_files_exist(public_key_file=public_key_file, input_file=input_file)
    _check_path(output_file)

    recipient = ephemeral_gpg.keylisting.get_recipient(
        public_key_file, home_dir=home_dir
    )
    LOG.debug("Encrypting '{}' for '{}'".format(input_file, recipient))

    with _temporary_encrypt_keyring(
        public_key_file, home_dir=home_dir
    ) as keyring_file:
        ephemeral_gpg.process.run_capture(
            "--keyring",
            keyring_file,
            "--output",
            output_file,
            "--encrypt",
            "--armor",
            "--recipient",
            recipient,
            "--yes",
            "--trust-model",
            "always",
            input_file,
            home_dir=home_dir,
        )


def decrypt_file(
    public_key_file,
    private_key_file,
    input_file,
    output_file,
    passphrase=None,
    home_dir=None,
):
    """
    <Purpose>
      Decrypt the input file with the key in the passed private key file and
      write the result to the output file, which is overwritten if it exists.

      NOTE: A passed passphrase is handed to gpg as command line argument,
      i.e. it is visible to other users of the system in the process list.

    <Arguments>
      public_key_file:
              Path to the public key file of the key pair.

      private_key_file:
              Path to the secret key file of the key pair.

      input_file:
              Path to the encrypted file.

      output_file:
              Path to write the decrypted file to.

      passphrase: (optional)
              Passphrase of the secret key. If not passed, gpg prompts for it,
              if the key is protected.

      home_dir: (optional)
              Directory in which the ephemeral gpg home directories are
              created.

    <Exceptions>
      ephemeral_gpg.exceptions.MissingFileError:
              If the public key file, the private key file or the input file
              does not exist. No gpg process is started in that case.

      ephemeral_gpg.exceptions.CommandError:
              If gpg fails, e.g. because of a wrong passphrase.

      ephemeral_gpg.exceptions.InvalidOutputError:
              If the recipient cannot be read from the private key file.

      securesystemslib.exceptions.FormatError:
              If the arguments are malformed.

    <Side Effects>
      Writes the output file.

    <Returns>
      None.

    """
    _check_files_exist(
        public_key_file=public_key_file,
        private_key_file=private_key_file,
        input_file=input_file,
    )
  
    _check_path(output_file)
    _check_optional_str(passphrase)

    # Fails early, if the private key file cannot be listed
    recipient = ephemeral_gpg.keylisting.get_recipient(
        private_key_file, home_dir=home_dir
    )
    LOG.debug("Decrypting '{}' for '{}'".format(input_file, recipient))

    with _temporary_decrypt_keyrings(
        private_key_file, home_dir=home_dir
    ) as (keyring_file, secret_keyring_file):
        args = [
            "--keyring",
            keyring_file,
            "--secret-keyring",
            secret_keyring_file,
            "--output",
            output_file,
            "--decrypt",
            "--yes",
            "--trust-model",
            "always",
            input_file,
        ]
        if passphrase is not None:
            args = ["--passphrase", passphrase] + args

        ephemeral_gpg.process.run_capture(*args, home_dir=home_dir)
