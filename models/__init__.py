# This file makes the models directory a Python package
from .comment import Comment
from .corpus import Book, Direction, Hit, LexiconEntry, Position, SearchMode, Token, Verse

__all__ = [
    'Book',
    'Comment',
    'Direction',
    'Hit',
    'LexiconEntry',
    'Position',
    'SearchMode',
    'Token',
    'Verse',
]
