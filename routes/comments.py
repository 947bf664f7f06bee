# routes/comments.py
from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError
from database import session_scope
from models import Comment
from schemas.comment_schemas import CommentCreate, CommentQuery
import logging

logger = logging.getLogger(__name__)

comments_bp = Blueprint('comments', __name__)


def _validation_error(err):
    fields = sorted({'.'.join(str(p) for p in e['loc']) for e in err.errors()})
    return jsonify({"error": "Missing or invalid fields", "fields": fields}), 400


@comments_bp.route('/comments', methods=['GET'])
def get_comments():
    try:
        query = CommentQuery.model_validate(request.args.to_dict())
    except ValidationError as err:
        logger.warning(f"Rejected comment lookup: {err.errors()}")
        return jsonify({"error": "Provide bookId, chapter, verse"}), 400

    with session_scope(current_app.extensions['db_session_factory']) as db:
        comments = db.query(Comment).filter(
            Comment.book == query.book,
            Comment.chapter == query.chapter,
            Comment.verse == query.verse
        ).order_by(Comment.created_at.desc(), Comment.id.desc()).all()
        return jsonify([c.to_json() for c in comments])


@comments_bp.route('/comments', methods=['POST'])
def create_comment():
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid JSON payload"}), 400

    try:
        payload = CommentCreate.model_validate(data)
    except ValidationError as err:
        return _validation_error(err)

    with session_scope(current_app.extensions['db_session_factory']) as db:
        comment = Comment(
            book=payload.book,
            chapter=payload.chapter,
            verse=payload.verse,
            author=payload.author or 'anonymous',
            body=payload.body,
        )
        db.add(comment)
        db.flush()
        db.refresh(comment)
        logger.info(f"Saved comment {comment.id} on {comment.book} {comment.chapter}:{comment.verse}")
        return jsonify(comment.to_json()), 201
