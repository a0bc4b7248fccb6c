"""
YARN.com request validation and threat detection core.

Package Components:
- utils.patterns: read-only threat pattern library
- utils.threat_scanner: single-string threat scanner
- utils.sanitization: allow-list HTML sanitizer
- utils.validation: field rule sets and the validation executor
- utils.sweep: recursive threat sweep over request payloads
- utils.middleware: Flask hooks wiring the pipeline into every request
- utils.response / utils.error_handling: rejection bodies and handlers
"""

__version__ = '1.0.0'
