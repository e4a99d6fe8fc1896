"""Typed keyword access on top of an ``astropy.io.fits.Header``.

The ``*_if_exists`` readers return ``None`` for absent keywords. A keyword
that is present but cannot be converted to the requested type is fatal,
as are missing keywords requested through the strict readers.
"""

from __future__ import annotations

import logging
import re

import numpy as np
from astropy.io import fits
from astropy.time import Time

from wsrt_beam.errors import InvalidHeaderError, ParseFailureError

logger = logging.getLogger(__name__)

# Pre-1999 FITS dates: DD/MM/YY, always in the twentieth century
_LEGACY_DATE = re.compile(r"^\s*(\d{2})/(\d{2})/(\d{2})\s*$")


class FitsHeader:
    """Keyword reader for a single FITS header."""

    def __init__(self, header: fits.Header, source: str = "<header>"):
        self._header = header
        self.source = source

    @classmethod
    def from_mapping(cls, cards: dict, source: str = "<mapping>") -> FitsHeader:
        """Build from a plain ``{keyword: value}`` mapping."""
        header = fits.Header()
        for key, value in cards.items():
            if key.upper() == "HISTORY":
                for line in value if isinstance(value, (list, tuple)) else [value]:
                    header.add_history(line)
            else:
                header[key] = value
        return cls(header, source)

    @property
    def header(self) -> fits.Header:
        return self._header

    def __contains__(self, key: str) -> bool:
        return key in self._header

    def _fail(self, message: str) -> InvalidHeaderError:
        return InvalidHeaderError(f"{self.source}: {message}")

    # Numeric keywords

    def read_double_key_if_exists(self, key: str) -> float | None:
        if key not in self._header:
            return None
        value = self._header[key]
        if isinstance(value, bool):
            raise ParseFailureError(f"{self.source}: keyword {key} is boolean, expected a number")
        if isinstance(value, (int, float)):
            return float(value)
        try:
            return float(str(value).strip())
        except ValueError as e:
            raise ParseFailureError(
                f"{self.source}: cannot parse keyword {key}={value!r} as a number"
            ) from e

    def read_float_key_if_exists(self, key: str) -> float | None:
        """Single-precision read, as stored in 32-bit keyword fields."""
        value = self.read_double_key_if_exists(key)
        if value is None:
            return None
        return float(np.float32(value))

    def read_double_key(self, key: str) -> float:
        value = self.read_double_key_if_exists(key)
        if value is None:
            raise self._fail(f"required keyword {key} is missing")
        return value

    # String keywords

    def read_string_key_if_exists(self, key: str) -> tuple[str, str] | None:
        """Return ``(value, comment)`` or None if the keyword is absent."""
        if key not in self._header:
            return None
        value = self._header[key]
        if isinstance(value, bool):
            value = "T" if value else "F"
        comment = self._header.comments[key] or ""
        return str(value).strip(), comment

    def read_string_key(self, key: str) -> str:
        found = self.read_string_key_if_exists(key)
        if found is None:
            raise self._fail(f"required keyword {key} is missing")
        return found[0]

    def read_string_value_if_exists(self, key: str) -> str | None:
        found = self.read_string_key_if_exists(key)
        return None if found is None else found[0]

    # Dates and history

    def read_date_key_if_exists(self, key: str) -> float | None:
        """Parse a date keyword to MJD (UTC)."""
        value = self.read_string_value_if_exists(key)
        if value is None:
            return None
        return self.parse_fits_date_to_mjd(value)

    @staticmethod
    def parse_fits_date_to_mjd(value: str) -> float:
        """Convert a FITS date string to a modified Julian date.

        Accepts ISO-8601 FITS dates (``YYYY-MM-DD[Thh:mm:ss[.sss]]``) and the
        legacy ``DD/MM/YY`` form.

        Raises
        ------
        ParseFailureError
            If the string is not a recognisable date.
        """
        text = value.strip()
        legacy = _LEGACY_DATE.match(text)
        if legacy:
            day, month, year = legacy.groups()
            text = f"19{year}-{month}-{day}"
            logger.debug("Interpreting legacy FITS date %s as %s", value, text)
        try:
            return float(Time(text, format="fits", scale="utc").mjd)
        except ValueError as e:
            raise ParseFailureError(f"Could not parse FITS date: {value}") from e

    def history(self) -> list[str]:
        """HISTORY card texts in encounter order."""
        return [str(card.value) for card in self._header.cards if card.keyword == "HISTORY"]

    # Axes

    def naxis(self) -> int:
        value = self.read_double_key_if_exists("NAXIS")
        return 0 if value is None else int(value)

    def axis_sizes(self) -> list[int]:
        sizes = []
        for i in range(1, self.naxis() + 1):
            sizes.append(int(self.read_double_key(f"NAXIS{i}")))
        return sizes
