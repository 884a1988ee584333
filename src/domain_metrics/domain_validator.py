"""
Domain validation and normalization module.

A domain is accepted when it consists of one or more labels made of letters,
digits, hyphens or underscores, each followed by a dot, and ends in a
top-level label of 2-63 letters. Schemes, paths, ports and surrounding
whitespace are rejected rather than stripped.
"""

import re
from dataclasses import dataclass
from typing import Optional

from .enums import DomainValidationErrorCode
from .exceptions import ValidationError
from .models import DomainQuery


DOMAIN_PATTERN = re.compile(r"^([a-z0-9_-]+\.)+[a-z]{2,63}$", re.IGNORECASE | re.ASCII)


@dataclass
class DomainValidationError:
    """Structured error information for domain validation failures."""

    code: DomainValidationErrorCode
    message: str
    details: dict


@dataclass
class DomainValidationResult:
    """Result of domain validation operation."""

    valid: bool
    canonical_domain: Optional[str]
    error: Optional[DomainValidationError]


def is_valid_domain(raw_domain: str) -> bool:
    """Return True if ``raw_domain`` is a syntactically acceptable domain."""
    if not isinstance(raw_domain, str):
        return False
    # re.match with $ would accept a trailing newline
    return DOMAIN_PATTERN.fullmatch(raw_domain) is not None


class DomainValidator:
    """
    Validates and normalizes domain names.

    Handles:
    - Pure acceptance check (``is_valid``)
    - Structured validation result with error codes (``validate``)
    - Conversion to the lower-case canonical ``DomainQuery`` (``normalize``)
    """

    def is_valid(self, raw_domain: str) -> bool:
        return is_valid_domain(raw_domain)

    def validate(self, raw_domain: str) -> DomainValidationResult:
        """
        Validate a domain string.

        Args:
            raw_domain: The raw domain string to validate

        Returns:
            DomainValidationResult with validation status and canonical form or error
        """
        if not raw_domain:
            return DomainValidationResult(
                valid=False,
                canonical_domain=None,
                error=DomainValidationError(
                    code=DomainValidationErrorCode.EMPTY_INPUT,
                    message="Domain input is empty",
                    details={"raw_input": raw_domain},
                ),
            )

        if not is_valid_domain(raw_domain):
            return DomainValidationResult(
                valid=False,
                canonical_domain=None,
                error=DomainValidationError(
                    code=DomainValidationErrorCode.INVALID_FORMAT,
                    message="Domain must look like 'name.tld' without scheme or path",
                    details={"raw_input": raw_domain},
                ),
            )

        return DomainValidationResult(
            valid=True,
            canonical_domain=raw_domain.lower(),
            error=None,
        )

    def normalize(self, raw_domain: str) -> DomainQuery:
        """
        Convert a domain string to its canonical query form.

        Raises:
            ValidationError: If the domain is not acceptable
        """
        result = self.validate(raw_domain)
        if not result.valid:
            raise ValidationError(
                code=result.error.code.value,
                message=result.error.message,
                details=result.error.details,
            )
        return DomainQuery(name=result.canonical_domain, raw=raw_domain)
