"""
Thread model: a community story topic that strands are contributed to.
"""

from typing import List

from . import db
from .base import BaseModel


class Thread(BaseModel):
    """
    Story thread with a title, a description and up to ten lower-case tags.

    Title and description are stored already sanitized; tags are stored as a
    JSON array.
    """

    __tablename__ = 'threads'

    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    tags = db.Column(db.JSON, nullable=False, default=list)

    strands = db.relationship(
        'Strand',
        back_populates='thread',
        order_by='Strand.created_at',
        cascade='all, delete-orphan',
        lazy='select',
    )

    @property
    def tag_list(self) -> List[str]:
        return list(self.tags or [])

    def __repr__(self) -> str:
        return f"<Thread(id={self.id}, title={self.title!r})>"
