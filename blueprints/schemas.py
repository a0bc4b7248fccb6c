"""
Marshmallow response schemas for threads and strands.

Field names on the wire keep the public API contract (``_id``, ``threadId``,
``contributorName``, ``createdAt``, ``updatedAt``).
"""

from marshmallow import Schema, fields as ma_fields


class TimestampedSchema(Schema):
    """Identifier and audit timestamps shared by every document."""

    id = ma_fields.Str(data_key='_id', dump_only=True)
    created_at = ma_fields.DateTime(data_key='createdAt', dump_only=True)
    updated_at = ma_fields.DateTime(data_key='updatedAt', dump_only=True)


class ThreadSchema(TimestampedSchema):
    title = ma_fields.Str(required=True)
    description = ma_fields.Str(required=True)
    tags = ma_fields.List(ma_fields.Str(), dump_default=list)


class StrandSchema(TimestampedSchema):
    thread_id = ma_fields.Str(data_key='threadId', required=True)
    contributor_name = ma_fields.Str(data_key='contributorName', required=True)
    content = ma_fields.Str(required=True)


thread_schema = ThreadSchema()
threads_schema = ThreadSchema(many=True)
strand_schema = StrandSchema()
strands_schema = StrandSchema(many=True)
