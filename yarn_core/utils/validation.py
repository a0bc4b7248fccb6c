"""
Declarative field rule sets and the executor that applies them.

Each content type accepted by the API is described by a :class:`RuleSet`,
an ordered tuple of :class:`FieldSpec` entries. Applying a rule set to a
request payload evaluates every field, collects every violation in rule
order and produces the cleaned (trimmed, sanitized, normalized) values the
route handlers persist.

Key Features:
- Length and character-class checks evaluated independently, so both may
  be reported for the same field
- Missing required strings are checked as the empty string
- Array elements validated one by one and reported as ``tags[0]``
- HTML sanitization applied only after a field's shape checks pass
- Document identifiers (24 hexadecimal characters) never sanitized
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Pattern, Tuple

from yarn_core.utils.sanitization import sanitize_html

OBJECT_ID_PATTERN = re.compile(r'[0-9a-fA-F]{24}')

TITLE_PATTERN = re.compile(r'[a-zA-Z0-9\s\-.,!?\'"()]+')
TAG_PATTERN = re.compile(r'[a-zA-Z0-9\-_]+')
CONTRIBUTOR_NAME_PATTERN = re.compile(r'[a-zA-Z0-9\s\-._]+')

_MISSING = object()


class FieldKind(Enum):
    STRING = "string"
    ARRAY = "array"
    ID = "id"


class FieldLocation(Enum):
    BODY = "body"
    PARAMS = "params"


@dataclass(frozen=True)
class FieldSpec:
    """
    Validation rule for a single named field.

    ``messages`` maps a constraint name (``type``, ``length``, ``pattern``,
    ``max_items``, ``id``) to the client-facing message reported when that
    constraint fails.
    """

    name: str
    kind: FieldKind = FieldKind.STRING
    location: FieldLocation = FieldLocation.BODY
    required: bool = True
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    max_items: Optional[int] = None
    pattern: Optional[Pattern] = None
    sanitize: bool = False
    lowercase: bool = False
    item: Optional['FieldSpec'] = None
    messages: Mapping[str, str] = field(default_factory=dict)

    def message(self, constraint: str) -> str:
        if constraint in self.messages:
            return self.messages[constraint]
        return f"Invalid value for {self.name}"


@dataclass(frozen=True)
class ValidationViolation:
    """A single failed constraint: field path, message and the raw value."""

    field: str
    message: str
    value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {'field': self.field, 'message': self.message, 'value': self.value}


@dataclass
class ValidationResult:
    """
    Result container for rule set application.

    ``cleaned_data`` only holds fields that passed every check; it is meant
    to be used when ``is_valid`` is true.
    """

    violations: List[ValidationViolation] = field(default_factory=list)
    cleaned_data: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.violations

    def add_violation(self, field_path: str, message: str, value: Any = None):
        self.violations.append(ValidationViolation(field_path, message, value))


@dataclass(frozen=True)
class RuleSet:
    """Ordered collection of field rules for one content type."""

    name: str
    fields: Tuple[FieldSpec, ...]

    def apply(
        self,
        data: Optional[Mapping[str, Any]],
        params: Optional[Mapping[str, Any]] = None
    ) -> ValidationResult:
        """
        Validate ``data`` (request body) and ``params`` (route parameters).

        Every field is evaluated regardless of earlier failures. Violations
        are returned in rule set order.
        """
        result = ValidationResult()
        sources = {
            FieldLocation.BODY: data if isinstance(data, Mapping) else {},
            FieldLocation.PARAMS: params or {},
        }

        for spec in self.fields:
            raw = sources[spec.location].get(spec.name, _MISSING)
            if raw is None:
                raw = _MISSING
            cleaned = _check_field(spec, spec.name, raw, result)
            if cleaned is not _MISSING:
                result.cleaned_data[spec.name] = cleaned

        return result

    def field_names(self) -> List[str]:
        return [spec.name for spec in self.fields]


def validate(
    rule_set: RuleSet,
    data: Optional[Mapping[str, Any]],
    params: Optional[Mapping[str, Any]] = None
) -> List[ValidationViolation]:
    """Apply ``rule_set`` and return only the violations."""
    return rule_set.apply(data, params).violations


def is_object_id(value: Any) -> bool:
    """True for a 24 character hexadecimal document identifier."""
    return isinstance(value, str) and OBJECT_ID_PATTERN.fullmatch(value) is not None


def _check_field(spec: FieldSpec, path: str, raw: Any, result: ValidationResult) -> Any:
    """
    Run one field's checks, record violations and return its cleaned value.

    Returns ``_MISSING`` when the field failed or was absent and optional.
    """
    if raw is _MISSING and not spec.required:
        return _MISSING

    if spec.kind is FieldKind.ARRAY:
        return _check_array(spec, path, raw, result)
    if spec.kind is FieldKind.ID:
        return _check_id(spec, path, raw, result)
    return _check_string(spec, path, raw, result)


def _coerce_text(raw: Any) -> Optional[str]:
    if raw is _MISSING:
        return ''
    if isinstance(raw, str):
        return raw
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return str(raw)
    return None


def _check_string(spec: FieldSpec, path: str, raw: Any, result: ValidationResult) -> Any:
    reported = None if raw is _MISSING else raw
    text = _coerce_text(raw)
    if text is None:
        result.add_violation(path, spec.message('type'), reported)
        return _MISSING

    value = text.strip()
    failed = False

    if not _length_ok(value, spec.min_length, spec.max_length):
        result.add_violation(path, spec.message('length'), reported)
        failed = True

    if spec.pattern is not None and spec.pattern.fullmatch(value) is None:
        result.add_violation(path, spec.message('pattern'), reported)
        failed = True

    if failed:
        return _MISSING

    if spec.sanitize:
        value = sanitize_html(value)
    if spec.lowercase:
        value = value.lower()
    return value


def _check_id(spec: FieldSpec, path: str, raw: Any, result: ValidationResult) -> Any:
    value = raw.strip() if isinstance(raw, str) else raw
    if not is_object_id(value):
        result.add_violation(path, spec.message('id'), None if raw is _MISSING else raw)
        return _MISSING
    return value


def _check_array(spec: FieldSpec, path: str, raw: Any, result: ValidationResult) -> Any:
    if not isinstance(raw, list):
        result.add_violation(path, spec.message('type'), None if raw is _MISSING else raw)
        return _MISSING

    failed = False
    if spec.max_items is not None and len(raw) > spec.max_items:
        result.add_violation(path, spec.message('max_items'), raw)
        failed = True

    cleaned_items = []
    if spec.item is not None:
        for index, element in enumerate(raw):
            cleaned = _check_field(spec.item, f"{path}[{index}]", element, result)
            if cleaned is _MISSING:
                failed = True
            else:
                cleaned_items.append(cleaned)
    else:
        cleaned_items = list(raw)

    return _MISSING if failed else cleaned_items


def _length_ok(value: str, minimum: Optional[int], maximum: Optional[int]) -> bool:
    if minimum is not None and len(value) < minimum:
        return False
    if maximum is not None and len(value) > maximum:
        return False
    return True


# Rule sets

TAG_RULE = FieldSpec(
    name='tags[]',
    min_length=2,
    max_length=30,
    pattern=TAG_PATTERN,
    lowercase=True,
    messages={
        'type': 'Each tag must be between 2 and 30 characters',
        'length': 'Each tag must be between 2 and 30 characters',
        'pattern': 'Tags can only contain letters, numbers, hyphens, and underscores',
    },
)

THREAD_RULES = RuleSet(
    name='thread',
    fields=(
        FieldSpec(
            name='title',
            min_length=3,
            max_length=200,
            pattern=TITLE_PATTERN,
            sanitize=True,
            messages={
                'type': 'Title must be a string',
                'length': 'Title must be between 3 and 200 characters',
                'pattern': 'Title contains invalid characters',
            },
        ),
        FieldSpec(
            name='description',
            min_length=10,
            max_length=1000,
            sanitize=True,
            messages={
                'type': 'Description must be a string',
                'length': 'Description must be between 10 and 1000 characters',
            },
        ),
        FieldSpec(
            name='tags',
            kind=FieldKind.ARRAY,
            required=False,
            max_items=10,
            item=TAG_RULE,
            messages={
                'type': 'Maximum 10 tags allowed',
                'max_items': 'Maximum 10 tags allowed',
            },
        ),
    ),
)

STRAND_RULES = RuleSet(
    name='strand',
    fields=(
        FieldSpec(
            name='threadId',
            kind=FieldKind.ID,
            messages={'id': 'Invalid thread ID format'},
        ),
        FieldSpec(
            name='contributorName',
            min_length=2,
            max_length=100,
            pattern=CONTRIBUTOR_NAME_PATTERN,
            sanitize=True,
            messages={
                'type': 'Contributor name must be a string',
                'length': 'Contributor name must be between 2 and 100 characters',
                'pattern': 'Contributor name contains invalid characters',
            },
        ),
        FieldSpec(
            name='content',
            min_length=5,
            max_length=2000,
            sanitize=True,
            messages={
                'type': 'Content must be a string',
                'length': 'Content must be between 5 and 2000 characters',
            },
        ),
    ),
)

ID_PARAMETER_RULES = RuleSet(
    name='id_parameter',
    fields=(
        FieldSpec(
            name='id',
            kind=FieldKind.ID,
            location=FieldLocation.PARAMS,
            messages={'id': 'Invalid ID format'},
        ),
        FieldSpec(
            name='threadId',
            kind=FieldKind.ID,
            location=FieldLocation.PARAMS,
            required=False,
            messages={'id': 'Invalid thread ID format'},
        ),
    ),
)

THREAD_REFERENCE_RULES = RuleSet(
    name='thread_reference',
    fields=(
        FieldSpec(
            name='threadId',
            kind=FieldKind.ID,
            location=FieldLocation.PARAMS,
            messages={'id': 'Invalid thread ID format'},
        ),
    ),
)
