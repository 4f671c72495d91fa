# Copyright the ephemeral-gpg contributors
# SPDX-License-Identifier: Apache-2.0

"""
Configure base logger for ephemeral_gpg (see ephemeral_gpg.log for details)
and expose the public key generation, encryption and decryption functions.

"""
import ephemeral_gpg.log
from ephemeral_gpg.functions import (
    decrypt_file,
    encrypt_file,
    generate_key_pair,
)

# ephemeral-gpg version
__version__ = "0.3.0"
