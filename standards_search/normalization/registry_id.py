"""
Registry id (CAS number) validation module.

Handles validation of CAS-style chemical registry identifiers by format and
check digit, plus extraction from free text and re-formatting of bare digit
strings.
"""

import re
from typing import Any, List, Optional


class RegistryIdValidator:
    """
    Validates and extracts CAS Registry Numbers.

    Format: 2-7 digits, hyphen, 2 digits, hyphen, 1 check digit
    Example: 7732-18-5 (Water)

    The check digit is the weighted sum of the preceding digits modulo 10,
    where the rightmost digit has weight 1 and weights increase by one
    moving left.
    """

    REGISTRY_PATTERN = re.compile(r'^[0-9]{2,7}-[0-9]{2}-[0-9]$')
    EMBEDDED_PATTERN = re.compile(r'(?<![0-9-])([0-9]{2,7}-[0-9]{2}-[0-9])(?![0-9-])')

    def validate(self, registry_id: Any) -> bool:
        """
        Validate a registry id using the check digit algorithm.

        1. The id must fully match the registry format
        2. Concatenate the first two groups into a digit string
        3. Starting from the right, multiply each digit by its position (1, 2, 3, ...)
        4. Sum all products; the sum modulo 10 must equal the check digit

        Never raises: anything malformed yields False.

        Args:
            registry_id: Candidate id

        Returns:
            True if the id is well formed and its check digit matches

        Examples:
            >>> RegistryIdValidator().validate("7732-18-5")
            True
            >>> RegistryIdValidator().validate("7732-18-6")
            False
        """
        if not registry_id or not isinstance(registry_id, str):
            return False

        if not self.REGISTRY_PATTERN.fullmatch(registry_id):
            return False

        first, second, check = registry_id.split('-')
        number_part = first + second

        total = 0
        for weight, digit in enumerate(reversed(number_part), start=1):
            total += int(digit) * weight

        return total % 10 == int(check)

    def is_registry_format(self, text: Any) -> bool:
        """
        Check if text matches the registry id format (without checksum).

        Useful for telling a user "this looks like a CAS number but the check
        digit is wrong" apart from "this is not a CAS number at all".
        """
        if not text or not isinstance(text, str):
            return False
        return self.REGISTRY_PATTERN.fullmatch(text.strip()) is not None

    def extract(self, text: Any) -> Optional[str]:
        """
        Extract the first valid registry id embedded in text.

        Examples:
            >>> RegistryIdValidator().extract("Water (CAS: 7732-18-5)")
            '7732-18-5'
            >>> RegistryIdValidator().extract("No id here") is None
            True
        """
        for candidate in self.extract_all(text):
            return candidate
        return None

    def extract_all(self, text: Any) -> List[str]:
        """Extract all valid registry ids from text, in order of appearance."""
        if not text or not isinstance(text, str):
            return []
        matches = self.EMBEDDED_PATTERN.findall(text)
        return [candidate for candidate in matches if self.validate(candidate)]

    def format(self, raw: Any) -> Optional[str]:
        """
        Format a registry id to the standard hyphenated form.

        Accepts ids with or without hyphens and surrounding whitespace.

        Returns:
            Formatted id, or None if the digits do not form a valid id

        Examples:
            >>> RegistryIdValidator().format("7732185")
            '7732-18-5'
        """
        if not raw or not isinstance(raw, str):
            return None

        digits_only = raw.strip().replace('-', '')
        if not digits_only.isascii() or not digits_only.isdigit():
            return None
        if not 5 <= len(digits_only) <= 10:
            return None

        formatted = f"{digits_only[:-3]}-{digits_only[-3:-1]}-{digits_only[-1]}"
        if self.validate(formatted):
            return formatted
        return None


_default_validator = RegistryIdValidator()


def validate_registry_id(registry_id: Any) -> bool:
    """Validate a registry id with the shared stateless validator."""
    return _default_validator.validate(registry_id)
