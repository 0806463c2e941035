"""
Legal Content Result Sanitizer

Filters batches returned by the generative backend, dropping records that
look hallucinated or dead: error-page text, paywalled or unreliable domains,
truncated or placeholder URLs, or no URL at all.

Guarantees:
- Whole records are accepted or rejected, never repaired
- Surviving records keep their input order
- No I/O and no mutation of the input
"""

import re
from enum import Enum
from typing import Iterable, Optional, TypeVar
from urllib.parse import urlparse

import structlog

from services.legal.types import ContentRecord

logger = structlog.get_logger(__name__)

R = TypeVar("R", bound=ContentRecord)


class RejectionReason(str, Enum):
    """Why a record was dropped."""
    NO_URL = "no_url"
    ERROR_TEXT = "error_text"
    BLOCKED_DOMAIN = "blocked_domain"
    INVALID_URL = "invalid_url"


class ResultSanitizer:
    """
    Accept/reject filter over any record exposing text_parts() and urls().

    Policy is static: error patterns and the domain blocklist are class
    constants.
    """

    # Text that means the model summarised an error page
    ERROR_PATTERNS = [
        re.compile(r"404", re.IGNORECASE),
        re.compile(r"page not found", re.IGNORECASE),
        re.compile(r"oops", re.IGNORECASE),
        re.compile(r"error 404", re.IGNORECASE),
        re.compile(r"not found", re.IGNORECASE),
        re.compile(r"access denied", re.IGNORECASE),
        re.compile(r"maintenance", re.IGNORECASE),
        re.compile(r"forbidden", re.IGNORECASE),
    ]

    # Paywalled or unreliable for direct reading
    BLOCKED_DOMAINS = frozenset([
        "livelaw.in",
        "barandbench.com",
        "scconline.com",
        "manupatra.com",
    ])

    MIN_URL_LENGTH = 15

    # "…" as U+2026, and as its UTF-8 bytes decoded as cp1252
    TRUNCATION_MARKERS = ("...", "…", "â€¦")

    PLACEHOLDER_MARKERS = ("example.com", "placeholder")

    def has_error_text(self, record: ContentRecord) -> bool:
        text = " ".join(record.text_parts()).lower()
        return any(pattern.search(text) for pattern in self.ERROR_PATTERNS)

    def is_blocked_domain(self, url: str) -> bool:
        """True if the URL's host is, or is a subdomain of, a blocked domain."""
        try:
            host = (urlparse(url.strip()).hostname or "").lower()
        except ValueError:
            return False
        return any(
            host == domain or host.endswith("." + domain)
            for domain in self.BLOCKED_DOMAINS
        )

    def is_valid_url(self, url: str) -> bool:
        lower_url = url.lower()
        if not lower_url.startswith(("http://", "https://")):
            return False
        if len(url) < self.MIN_URL_LENGTH:
            return False
        if any(marker in url for marker in self.TRUNCATION_MARKERS):
            return False
        if any(marker in lower_url for marker in self.PLACEHOLDER_MARKERS):
            return False
        try:
            urlparse(url)
        except ValueError:
            # e.g. an unclosed IPv6 bracket in the host
            return False
        return True

    def rejection_reason(self, record: ContentRecord) -> Optional[RejectionReason]:
        """
        Return the first reason a record fails, or None if it passes.

        Args:
            record: Any ContentRecord

        Returns:
            RejectionReason or None
        """
        urls = record.urls()
        if not urls:
            return RejectionReason.NO_URL
        if self.has_error_text(record):
            return RejectionReason.ERROR_TEXT
        if any(self.is_blocked_domain(url) for url in urls):
            return RejectionReason.BLOCKED_DOMAIN
        if not all(self.is_valid_url(url) for url in urls):
            return RejectionReason.INVALID_URL
        return None

    def sanitize(self, records: Iterable[R]) -> list[R]:
        """
        Filter a batch, keeping only records that pass every check.

        Args:
            records: Batch in backend order

        Returns:
            New list with the surviving records, order preserved
        """
        kept = []
        rejected = 0
        for record in records:
            reason = self.rejection_reason(record)
            if reason is None:
                kept.append(record)
                continue
            rejected += 1
            logger.debug(
                "record_rejected",
                reason=reason.value,
                record_type=type(record).__name__,
            )

        if rejected:
            logger.info("batch_sanitized", kept=len(kept), rejected=rejected)
        return kept


# Module-level singleton
_sanitizer: Optional[ResultSanitizer] = None


def get_sanitizer() -> ResultSanitizer:
    """Get or create the result sanitizer singleton."""
    global _sanitizer
    if _sanitizer is None:
        _sanitizer = ResultSanitizer()
    return _sanitizer


def sanitize(records: Iterable[R]) -> list[R]:
    """Filter a batch with the shared sanitizer."""
    return get_sanitizer().sanitize(records)
