"""
Single-string threat scanner.

Runs one text value through every pattern in the threat library and reports
which threat classes were recognised. The scanner is a pure function: it
keeps no state between calls and is safe to use from concurrent requests.
"""

from dataclasses import dataclass
from typing import List, Tuple

from yarn_core.utils.error_handling import ScanError
from yarn_core.utils.patterns import PATTERN_LIBRARY, ThreatClass

# Upper bound on the length of a single value handed to the regex engine.
DEFAULT_MAX_SCAN_LENGTH = 100_000


@dataclass(frozen=True)
class ThreatReport:
    """
    Ordered, duplicate-free set of threat classes found in one value.

    An empty report means the value is clean; the report is falsy in that
    case so callers can write ``if scan(value): ...``.
    """

    threats: Tuple[ThreatClass, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.threats)

    def __contains__(self, threat_class: ThreatClass) -> bool:
        return threat_class in self.threats

    @property
    def is_clean(self) -> bool:
        return not self.threats

    def to_list(self) -> List[str]:
        """Threat class names in library order, as sent to clients."""
        return [threat.value for threat in self.threats]


CLEAN = ThreatReport()


def scan(value: str, max_length: int = DEFAULT_MAX_SCAN_LENGTH) -> ThreatReport:
    """
    Scan a string against the full threat pattern library.

    Each threat class is reported at most once, as soon as any of its
    patterns matches. Classes are evaluated independently, so one value may
    carry several classes.

    Args:
        value: Text to inspect.
        max_length: Longest value that will be evaluated.

    Returns:
        ThreatReport: Classes detected, in library order.

    Raises:
        ScanError: If ``value`` is longer than ``max_length``.
    """
    if len(value) > max_length:
        raise ScanError(
            f"Value of length {len(value)} exceeds scan limit of {max_length}",
            details={'length': len(value), 'limit': max_length},
        )

    detected = tuple(
        threat_class
        for threat_class, patterns in PATTERN_LIBRARY
        if any(pattern.matches(value) for pattern in patterns)
    )
    return ThreatReport(detected) if detected else CLEAN


def detect_suspicious_input(value: str) -> List[str]:
    """Return the names of the threat classes found in ``value``."""
    return scan(value).to_list()
