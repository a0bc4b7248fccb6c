"""
Threat pattern library for request content inspection.

This module holds the fixed, read-only catalogue of regular expressions used
to recognise hostile input before it reaches the validation layer. Patterns
are grouped by threat class and compiled once at import time.

Key Features:
- Three threat classes: cross-site scripting, SQL-injection-shaped text and
  path traversal sequences
- Case-insensitive matching for every pattern
- Immutable collections (tuples of frozen dataclasses) safe to share between
  worker threads without locking
- Patterns avoid nested unbounded quantifiers so matching stays linear on
  attacker-controlled input
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Pattern, Tuple


class ThreatClass(Enum):
    """Category of hostile content a pattern recognises."""

    XSS = 'XSS'
    SQL_INJECTION = 'SQL_INJECTION'
    PATH_TRAVERSAL = 'PATH_TRAVERSAL'

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ThreatPattern:
    """A compiled regular expression tagged with the threat class it detects."""

    regex: Pattern
    threat_class: ThreatClass
    description: str = ''

    def matches(self, value: str) -> bool:
        return self.regex.search(value) is not None


def _compile(expression: str, threat_class: ThreatClass, description: str) -> ThreatPattern:
    return ThreatPattern(
        regex=re.compile(expression, re.IGNORECASE),
        threat_class=threat_class,
        description=description,
    )


def _block(tag: str) -> str:
    # <tag ...> ... </tag> with the body consumed one tag at a time
    return rf'<{tag}\b[^<]*(?:<(?!/{tag}>)[^<]*)*</{tag}>'


XSS_PATTERNS: Tuple[ThreatPattern, ...] = (
    _compile(_block('script'), ThreatClass.XSS, 'script block'),
    _compile(r'<script\b[^>]*>', ThreatClass.XSS, 'opening script tag'),
    _compile(r'javascript:', ThreatClass.XSS, 'javascript URI scheme'),
    _compile(r'on\w+\s*=', ThreatClass.XSS, 'inline event handler'),
    _compile(_block('iframe'), ThreatClass.XSS, 'iframe block'),
    _compile(_block('object'), ThreatClass.XSS, 'object block'),
    _compile(_block('embed'), ThreatClass.XSS, 'embed block'),
    _compile(_block('form'), ThreatClass.XSS, 'form block'),
)

SQL_INJECTION_PATTERNS: Tuple[ThreatPattern, ...] = (
    _compile(
        r'\b(?:SELECT|INSERT|UPDATE|DELETE|DROP|CREATE|ALTER|EXEC|UNION)\b',
        ThreatClass.SQL_INJECTION,
        'SQL statement keyword',
    ),
    _compile(r'--|#|/\*|\*/', ThreatClass.SQL_INJECTION, 'SQL comment token'),
    _compile(r'\b(?:OR|AND)\b[^\n=]*=', ThreatClass.SQL_INJECTION, 'boolean tautology'),
)

PATH_TRAVERSAL_PATTERNS: Tuple[ThreatPattern, ...] = (
    _compile(r'\.\./', ThreatClass.PATH_TRAVERSAL, 'parent directory (slash)'),
    _compile(r'\.\.\\', ThreatClass.PATH_TRAVERSAL, 'parent directory (backslash)'),
    _compile(r'%2e%2e%2f', ThreatClass.PATH_TRAVERSAL, 'encoded parent directory (slash)'),
    _compile(r'%2e%2e%5c', ThreatClass.PATH_TRAVERSAL, 'encoded parent directory (backslash)'),
)

# Library order is the order classes are reported in
PATTERN_LIBRARY: Tuple[Tuple[ThreatClass, Tuple[ThreatPattern, ...]], ...] = (
    (ThreatClass.XSS, XSS_PATTERNS),
    (ThreatClass.SQL_INJECTION, SQL_INJECTION_PATTERNS),
    (ThreatClass.PATH_TRAVERSAL, PATH_TRAVERSAL_PATTERNS),
)


def patterns_for(threat_class: ThreatClass) -> Tuple[ThreatPattern, ...]:
    """Return the pattern collection registered for ``threat_class``."""
    for registered_class, patterns in PATTERN_LIBRARY:
        if registered_class is threat_class:
            return patterns
    raise KeyError(threat_class)
