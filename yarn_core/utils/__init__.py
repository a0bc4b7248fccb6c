"""
Utilities Package for the request pipeline.

Usage:
    from yarn_core.utils import scan, sanitize_html, sweep, THREAD_RULES
"""

from yarn_core.utils.patterns import (
    PATH_TRAVERSAL_PATTERNS,
    PATTERN_LIBRARY,
    SQL_INJECTION_PATTERNS,
    XSS_PATTERNS,
    ThreatClass,
    ThreatPattern,
)
from yarn_core.utils.threat_scanner import ThreatReport, detect_suspicious_input, scan
from yarn_core.utils.sanitization import sanitize_html
from yarn_core.utils.validation import (
    ID_PARAMETER_RULES,
    STRAND_RULES,
    THREAD_REFERENCE_RULES,
    THREAD_RULES,
    FieldSpec,
    RuleSet,
    ValidationResult,
    ValidationViolation,
    validate,
)
from yarn_core.utils.sweep import Clean, Flagged, collapse_query_params, sweep, sweep_request

__all__ = [
    'PATH_TRAVERSAL_PATTERNS',
    'PATTERN_LIBRARY',
    'SQL_INJECTION_PATTERNS',
    'XSS_PATTERNS',
    'ThreatClass',
    'ThreatPattern',
    'ThreatReport',
    'detect_suspicious_input',
    'scan',
    'sanitize_html',
    'ID_PARAMETER_RULES',
    'STRAND_RULES',
    'THREAD_REFERENCE_RULES',
    'THREAD_RULES',
    'FieldSpec',
    'RuleSet',
    'ValidationResult',
    'ValidationViolation',
    'validate',
    'Clean',
    'Flagged',
    'collapse_query_params',
    'sweep',
    'sweep_request',
]
