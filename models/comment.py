# models/comment.py
from sqlalchemy import Column, Integer, String, DateTime, Text, func
from database import Base


class Comment(Base):
    __tablename__ = 'comments'

    id = Column(Integer, primary_key=True, index=True)

    # Book identifier exactly as the client sent it
    book = Column(String(100), nullable=False, index=True)
    chapter = Column(Integer, nullable=False, index=True)
    verse = Column(Integer, nullable=False, index=True)

    author = Column(String(100), nullable=False, default='anonymous')
    body = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def to_json(self):
        return {
            "id": self.id,
            "author": self.author,
            "body": self.body,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<Comment {self.id} by {self.author} - {self.book} {self.chapter}:{self.verse}>'
