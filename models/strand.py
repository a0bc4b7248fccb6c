"""
Strand model: one contribution to a thread's story.
"""

from . import db
from .base import BaseModel


class Strand(BaseModel):
    """A contributor's piece of a thread, listed oldest first."""

    __tablename__ = 'strands'

    thread_id = db.Column(
        db.String(24),
        db.ForeignKey('threads.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    contributor_name = db.Column(db.Text, nullable=False)
    content = db.Column(db.Text, nullable=False)

    thread = db.relationship('Thread', back_populates='strands')

    def __repr__(self) -> str:
        return f"<Strand(id={self.id}, thread_id={self.thread_id})>"
