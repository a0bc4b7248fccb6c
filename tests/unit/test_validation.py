"""
Unit tests for field rule sets and the validation executor.

Test Organization:
- TestThreadRules: title, description and tags checks, cleaning and normalization
- TestStrandRules: thread reference, contributor name and content
- TestParameterRules: route parameter identifiers
- TestExecutor: generic executor behaviour independent of a content type
"""

import pytest

from yarn_core.utils.validation import (
    ID_PARAMETER_RULES,
    STRAND_RULES,
    THREAD_REFERENCE_RULES,
    THREAD_RULES,
    FieldKind,
    FieldSpec,
    RuleSet,
    ValidationViolation,
    is_object_id,
    validate,
)

THREAD_ID = '507f1f77bcf86cd799439011'


def _messages(result):
    return [(violation.field, violation.message) for violation in result.violations]


@pytest.mark.unit
class TestThreadRules:
    """Rules applied to POST /api/threads bodies."""

    def test_valid_thread_is_cleaned(self):
        result = THREAD_RULES.apply({
            'title': '  My Story  ',
            'description': 'A long enough description.',
            'tags': ['SciFi', 'short-story'],
        })
        assert result.is_valid
        assert result.cleaned_data == {
            'title': 'My Story',
            'description': 'A long enough description.',
            'tags': ['scifi', 'short-story'],
        }

    def test_tags_are_optional(self):
        result = THREAD_RULES.apply({
            'title': 'My Story',
            'description': 'A long enough description.',
        })
        assert result.is_valid
        assert 'tags' not in result.cleaned_data

    def test_null_tags_treated_as_absent(self):
        result = THREAD_RULES.apply({
            'title': 'My Story',
            'description': 'A long enough description.',
            'tags': None,
        })
        assert result.is_valid

    def test_empty_body_reports_every_required_field(self):
        result = THREAD_RULES.apply({})
        assert _messages(result) == [
            ('title', 'Title must be between 3 and 200 characters'),
            ('title', 'Title contains invalid characters'),
            ('description', 'Description must be between 10 and 1000 characters'),
        ]
        assert result.violations[0].value is None

    def test_missing_body_behaves_like_empty_body(self):
        assert _messages(THREAD_RULES.apply(None)) == _messages(THREAD_RULES.apply({}))
        assert _messages(THREAD_RULES.apply(['not', 'a', 'mapping'])) == _messages(THREAD_RULES.apply({}))

    def test_length_and_pattern_reported_independently(self):
        result = THREAD_RULES.apply({
            'title': '<>',
            'description': 'A long enough description.',
        })
        assert _messages(result) == [
            ('title', 'Title must be between 3 and 200 characters'),
            ('title', 'Title contains invalid characters'),
        ]
        assert result.violations[0].value == '<>'

    def test_title_length_counted_after_trim(self):
        result = THREAD_RULES.apply({'title': '   ab   ', 'description': 'A long enough description.'})
        assert _messages(result) == [('title', 'Title must be between 3 and 200 characters')]

    def test_title_boundaries(self):
        base = {'description': 'A long enough description.'}
        assert THREAD_RULES.apply({**base, 'title': 'abc'}).is_valid
        assert THREAD_RULES.apply({**base, 'title': 'a' * 200}).is_valid
        assert not THREAD_RULES.apply({**base, 'title': 'a' * 201}).is_valid

    def test_title_rejects_markup_characters(self):
        result = THREAD_RULES.apply({'title': 'Hello <b>', 'description': 'A long enough description.'})
        assert _messages(result) == [('title', 'Title contains invalid characters')]

    def test_description_sanitized(self):
        result = THREAD_RULES.apply({
            'title': 'My Story',
            'description': '<p class="intro">Once upon a <span>time</span></p>',
        })
        assert result.is_valid
        assert result.cleaned_data['description'] == '<p>Once upon a time</p>'

    def test_description_length_checked_before_sanitizing(self):
        result = THREAD_RULES.apply({'title': 'My Story', 'description': '<p>short</p>'})
        assert result.is_valid
        assert result.cleaned_data['description'] == '<p>short</p>'

    def test_non_string_title(self):
        result = THREAD_RULES.apply({'title': ['x'], 'description': 'A long enough description.'})
        assert _messages(result) == [('title', 'Title must be a string')]

    def test_numeric_title_is_coerced(self):
        result = THREAD_RULES.apply({'title': 12345, 'description': 'A long enough description.'})
        assert result.is_valid
        assert result.cleaned_data['title'] == '12345'

    def test_too_many_tags(self):
        tags = [f'tag{i}' for i in range(11)]
        result = THREAD_RULES.apply({
            'title': 'My Story',
            'description': 'A long enough description.',
            'tags': tags,
        })
        assert result.violations == [ValidationViolation('tags', 'Maximum 10 tags allowed', tags)]

    def test_ten_tags_allowed(self):
        result = THREAD_RULES.apply({
            'title': 'My Story',
            'description': 'A long enough description.',
            'tags': [f'tag{i}' for i in range(10)],
        })
        assert result.is_valid

    def test_tags_must_be_array(self):
        result = THREAD_RULES.apply({
            'title': 'My Story',
            'description': 'A long enough description.',
            'tags': 'fantasy',
        })
        assert _messages(result) == [('tags', 'Maximum 10 tags allowed')]

    def test_invalid_tag_elements_reported_by_index(self):
        result = THREAD_RULES.apply({
            'title': 'My Story',
            'description': 'A long enough description.',
            'tags': ['ok', 'x', 'bad tag'],
        })
        assert _messages(result) == [
            ('tags[1]', 'Each tag must be between 2 and 30 characters'),
            ('tags[2]', 'Tags can only contain letters, numbers, hyphens, and underscores'),
        ]
        assert 'tags' not in result.cleaned_data


@pytest.mark.unit
class TestStrandRules:
    """Rules applied to POST /api/strands bodies."""

    def test_valid_strand(self):
        result = STRAND_RULES.apply({
            'threadId': THREAD_ID,
            'contributorName': ' Jane_Doe ',
            'content': 'It was a dark night.',
        })
        assert result.is_valid
        assert result.cleaned_data == {
            'threadId': THREAD_ID,
            'contributorName': 'Jane_Doe',
            'content': 'It was a dark night.',
        }

    def test_invalid_thread_id(self):
        result = STRAND_RULES.apply({
            'threadId': 'not-an-id',
            'contributorName': 'Jane',
            'content': 'It was a dark night.',
        })
        assert result.violations == [
            ValidationViolation('threadId', 'Invalid thread ID format', 'not-an-id')
        ]

    def test_thread_id_is_not_sanitized_or_lowered(self):
        upper = THREAD_ID.upper()
        result = STRAND_RULES.apply({
            'threadId': upper,
            'contributorName': 'Jane',
            'content': 'It was a dark night.',
        })
        assert result.cleaned_data['threadId'] == upper

    def test_contributor_name_pattern(self):
        result = STRAND_RULES.apply({
            'threadId': THREAD_ID,
            'contributorName': 'Jane!',
            'content': 'It was a dark night.',
        })
        assert _messages(result) == [('contributorName', 'Contributor name contains invalid characters')]

    def test_content_sanitized(self):
        result = STRAND_RULES.apply({
            'threadId': THREAD_ID,
            'contributorName': 'Jane',
            'content': '<em>Rain</em> fell <span>softly</span>.',
        })
        assert result.cleaned_data['content'] == '<em>Rain</em> fell softly.'

    def test_all_violations_in_rule_order(self):
        result = STRAND_RULES.apply({'contributorName': 'J', 'content': 'hey'})
        assert [violation.field for violation in result.violations] == [
            'threadId', 'contributorName', 'content'
        ]


@pytest.mark.unit
class TestParameterRules:
    """Route parameter rules."""

    def test_valid_id_parameter(self):
        result = ID_PARAMETER_RULES.apply(None, {'id': THREAD_ID})
        assert result.is_valid
        assert result.cleaned_data == {'id': THREAD_ID}

    def test_invalid_id_parameter(self):
        assert validate(ID_PARAMETER_RULES, None, {'id': '123'}) == [
            ValidationViolation('id', 'Invalid ID format', '123')
        ]

    def test_optional_thread_id_parameter_checked_when_present(self):
        violations = validate(ID_PARAMETER_RULES, None, {'id': THREAD_ID, 'threadId': 'zzz'})
        assert violations == [ValidationViolation('threadId', 'Invalid thread ID format', 'zzz')]

    def test_thread_reference(self):
        assert THREAD_REFERENCE_RULES.apply(None, {'threadId': THREAD_ID}).is_valid
        assert validate(THREAD_REFERENCE_RULES, None, {'threadId': 'abc'}) == [
            ValidationViolation('threadId', 'Invalid thread ID format', 'abc')
        ]

    def test_body_fields_do_not_satisfy_parameter_rules(self):
        violations = validate(THREAD_REFERENCE_RULES, {'threadId': THREAD_ID}, {})
        assert [violation.field for violation in violations] == ['threadId']


@pytest.mark.unit
class TestExecutor:
    """Executor behaviour with ad hoc rule sets."""

    def test_default_message(self):
        rules = RuleSet('sample', (FieldSpec('name', min_length=3),))
        assert validate(rules, {'name': 'ab'}) == [
            ValidationViolation('name', 'Invalid value for name', 'ab')
        ]

    def test_boolean_is_not_a_string(self):
        rules = RuleSet('sample', (FieldSpec('name', messages={'type': 'Name must be a string'}),))
        assert validate(rules, {'name': True}) == [
            ValidationViolation('name', 'Name must be a string', True)
        ]

    def test_array_without_item_rule_keeps_elements(self):
        rules = RuleSet('sample', (FieldSpec('items', kind=FieldKind.ARRAY, max_items=3),))
        result = rules.apply({'items': [1, 'a']})
        assert result.cleaned_data == {'items': [1, 'a']}

    def test_field_names(self):
        assert THREAD_RULES.field_names() == ['title', 'description', 'tags']

    def test_violation_to_dict(self):
        assert ValidationViolation('title', 'bad', 'x').to_dict() == {
            'field': 'title', 'message': 'bad', 'value': 'x'
        }

    @pytest.mark.parametrize('value,expected', [
        (THREAD_ID, True),
        (THREAD_ID.upper(), True),
        (THREAD_ID[:-1], False),
        (THREAD_ID + '0', False),
        ('g' * 24, False),
        (None, False),
    ])
    def test_is_object_id(self, value, expected):
        assert is_object_id(value) is expected
