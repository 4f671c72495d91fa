# Copyright the ephemeral-gpg contributors
# SPDX-License-Identifier: Apache-2.0

"""
<Program Name>
  keylisting.py

<Started>
  March 4, 2014

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Resolve the recipient (email address) of a key file from gpg's key
  listing, i.e. what gpg prints if it is called with a key file and no
  command.

  Two listing formats are supported, see
  `ephemeral_gpg.settings.KEY_LISTING_FORMAT`:

  - "text", the human readable listing of gpg 1.x, e.g.
    ```
    pub  1024D/ABCD1234 2020-01-01 Alice <alice@example.com>
    sub  1024g/0123ABCD 2020-01-01
    ```
  - "colons", the machine readable `--with-colons` listing, e.g.
    ```
    pub:-:1024:17:9AE5E26EABCD1234:1577836800:::-:::scESC:
    uid:-::::1577836800::2C6E...::Alice <alice@example.com>:
    ```

"""
import datetime
import logging
import re

import attr
import dateutil.parser
import dateutil.tz

import ephemeral_gpg.exceptions
import ephemeral_gpg.process
import ephemeral_gpg.settings
from ephemeral_gpg.formats import _check_path

# Inherits from ephemeral_gpg base logger (c.f. ephemeral_gpg.log)
LOG = logging.getLogger(__name__)

LISTING_FORMAT_TEXT = "text"
LISTING_FORMAT_COLONS = "colons"
LISTING_FORMATS = [LISTING_FORMAT_TEXT, LISTING_FORMAT_COLONS]

# Public or secret key row with key length, algorithm (DSA or RSA), 8 hex
# digit key id and an email address in angle brackets
KEY_LINE_PATTERN = re.compile(
    r"^(?P<kind>pub|sec)\s+(?P<length>\d+)(?P<algorithm>D|R)"
    r"/(?P<keyid>[0-9a-fA-F]{8})(?P<rest>.+)<(?P<email>.+)>"
)
DATE_PATTERN = re.compile(r"^\s*(?P<date>\d{4}-\d{2}-\d{2})?\s*(?P<name>.*?)\s*$")
EMAIL_PATTERN = re.compile(r"<(?P<email>.+)>")

# See RFC4880 section 9.1. (Public-Key Algorithms)
ALGORITHM_LETTERS = {
    "1": "R",
    "2": "R",
    "3": "R",
    "16": "g",
    "17": "D",
}


@attr.s(frozen=True)
class KeyListing:
    """First public or secret key row of a gpg key listing.

    Attributes:
      kind: "pub" or "sec".
      length: Key length in bits, or None if not listed or invalid.
      algorithm: Algorithm letter as printed by gpg, e.g. "D" (DSA) or "R"
          (RSA).
      keyid: The last 8 hex digits of the key id.
      created: Creation date (datetime.date), or None if not listed or invalid.
      name: User id without the email address.
      email: Email address of the user id, used as recipient.

    """

    kind = attr.ib()
    length = attr.ib(converter=attr.converters.optional(int))
    algorithm = attr.ib()
    keyid = attr.ib()
    created = attr.ib()
    name = attr.ib()
    email = attr.ib()


def _parse_date(value):
    """Parse 'YYYY-MM-DD' or seconds since epoch, as used by gpg listings, or
    return None if the value is not a valid date."""
    if not value:
        return None

    try:
        if value.isdigit():
            return datetime.datetime.fromtimestamp(
                int(value), dateutil.tz.UTC
            ).date()

        return dateutil.parser.isoparse(value).date()

    except (ValueError, OverflowError, OSError):
        LOG.debug("Ignoring invalid key creation date '{}'".format(value))
        return None


def _parse_length(value):
    try:
        return int(value)

    except ValueError:
        return None


def _unescape_colon_field(value):
    # gpg c-escapes colons and other special characters in user ids
    return re.sub(
        r"\\x([0-9a-fA-F]{2})", lambda match: chr(int(match.group(1), 16)), value
    )


def parse_key_listing(lines):
    """
    <Purpose>
      Return the first row of a human readable gpg key listing that lists a
      public or secret key with an email address.

    <Arguments>
      lines:
              The lines of the listing. (list of str)

    <Exceptions>
      ephemeral_gpg.exceptions.InvalidOutputError:
              If no line matches `KEY_LINE_PATTERN`.

    <Returns>
      A KeyListing object.

    """
    for line in lines:
        match = KEY_LINE_PATTERN.match(line)
        if not match:
            continue

        rest = DATE_PATTERN.match(match.group("rest"))
        return KeyListing(
            kind=match.group("kind"),
            length=_parse_length(match.group("length")),
            algorithm=match.group("algorithm"),
            keyid=match.group("keyid"),
            created=_parse_date(rest.group("date")),
            name=rest.group("name"),
            email=match.group("email"),
        )

    raise ephemeral_gpg.exceptions.InvalidOutputError("Invalid output")


def parse_colon_listing(lines):
    """
    <Purpose>
      Return the first public or secret key of a `--with-colons` gpg key
      listing together with its first user id that has an email address.

      The user id is taken from field 10 of the key record (gpg 1.x), or from
      the subsequent 'uid' records (gpg 2.x).

    <Arguments>
      lines:
              The lines of the listing. (list of str)

    <Exceptions>
      ephemeral_gpg.exceptions.InvalidOutputError:
              If there is no key record, or no user id with an email address.

    <Returns>
      A KeyListing object.

    """
    key_fields = None
    user_ids = []

    for line in lines:
        fields = line.split(":")
        record_type = fields[0]

        if key_fields is None:
            if record_type in ["pub", "sec"] and len(fields) > 5:
                key_fields = fields
                if len(fields) > 9 and fields[9]:
                    user_ids.append(fields[9])

        elif record_type in ["pub", "sec"]:
            # Only the user ids of the first key are considered
            break

        elif record_type == "uid" and len(fields) > 9:
            user_ids.append(fields[9])

    if key_fields is None:
        raise ephemeral_gpg.exceptions.InvalidOutputError("Invalid output")

    for user_id in user_ids:
        user_id = _unescape_colon_field(user_id)
        match = EMAIL_PATTERN.search(user_id)
        if match:
            return KeyListing(
                kind=key_fields[0],
                length=_parse_length(key_fields[2]),
                algorithm=ALGORITHM_LETTERS.get(key_fields[3], key_fields[3]),
                keyid=key_fields[4][-8:].upper(),
                created=_parse_date(key_fields[5]),
                name=user_id[: match.start()].strip(),
                email=match.group("email"),
            )

    raise ephemeral_gpg.exceptions.InvalidOutputError("Invalid output")


def get_key_listing(key_file, home_dir=None):
    """
    <Purpose>
      Let gpg list the key in the passed key file and parse the listing in the
      format configured in `ephemeral_gpg.settings.KEY_LISTING_FORMAT`.

    <Arguments>
      key_file:
              Path to a public or secret key file (or keyring).

      home_dir: (optional)
              Directory in which the ephemeral gpg home directory is created.

    <Exceptions>
      ephemeral_gpg.exceptions.CommandError:
              If gpg fails.

      ephemeral_gpg.exceptions.InvalidOutputError:
              If the listing does not contain a key with an email address.

      ValueError:
              If the configured listing format is not supported.

    <Returns>
      A KeyListing object.

    """
    _check_path(key_file)

    listing_format = ephemeral_gpg.settings.KEY_LISTING_FORMAT
    if listing_format == LISTING_FORMAT_TEXT:
        lines = ephemeral_gpg.process.run_capture(key_file, home_dir=home_dir)
        key_listing = parse_key_listing(lines)

    elif listing_format == LISTING_FORMAT_COLONS:
        lines = ephemeral_gpg.process.run_capture(
            "--with-colons", key_file, home_dir=home_dir
        )
        key_listing = parse_colon_listing(lines)

    else:
        raise ValueError(
            "Key listing format '{}' not supported, must be one of '{}'".format(
                listing_format, LISTING_FORMATS
            )
        )

    LOG.debug("Listed key '{}' in '{}'".format(key_listing.keyid, key_file))
    return key_listing


def get_recipient(key_file, home_dir=None):
    """Return the email address of the key in the passed key file, which
    identifies the key as recipient. See `get_key_listing` for details."""
    return get_key_listing(key_file, home_dir=home_dir).email
