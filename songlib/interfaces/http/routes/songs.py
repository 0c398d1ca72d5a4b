"""Song CRUD, filtered search and paginated lyrics."""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from songlib.domain.catalog import SongDomainError, SongService, SongServiceError
from songlib.models.dto import (
    ErrorResponse,
    LyricsPageParams,
    SongCreate,
    SongQueryParams,
    SongUpdate,
    SuccessResponse,
)


logger = logging.getLogger(__name__)

songs_bp = Blueprint('songs_bp', __name__, url_prefix='/songs')


def get_song_service() -> SongService:
    return current_app.extensions['song_service']


def _success(message: str, data=None, status: int = 200):
    return jsonify(SuccessResponse(message=message, data=data).model_dump()), status


def _error(message: str, status: int):
    return jsonify(ErrorResponse(error=message).model_dump()), status


def _validation_message(exc: ValidationError) -> str:
    first = exc.errors()[0] if exc.errors() else {}
    location = '.'.join(str(part) for part in first.get('loc', ()) if part != '__root__')
    message = str(first.get('msg', 'invalid request'))
    # model-level validators report "Value error, <text>"
    if message.startswith('Value error, '):
        message = message[len('Value error, '):]
    return f"{location}: {message}" if location else message


def _service_error(exc: SongServiceError):
    if isinstance(exc, SongDomainError):
        logger.info("Song request rejected: %s", exc)
        return _error(str(exc), 400)
    logger.error("Song request failed: %s", exc, exc_info=True)
    return _error(str(exc), 500)


@songs_bp.route('', methods=['POST'])
def create_song():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return _error('invalid request body', 400)
    try:
        data = SongCreate.model_validate(payload)
    except ValidationError as exc:
        return _error(_validation_message(exc), 400)

    logger.info("Received create request for %s - %s", data.group, data.title)
    try:
        song_id = get_song_service().create_song(data.group, data.title)
    except SongServiceError as exc:
        return _service_error(exc)
    return _success('song created', {'id': song_id})


@songs_bp.route('', methods=['GET'])
def list_songs():
    try:
        params = SongQueryParams.model_validate(request.args.to_dict())
    except ValidationError as exc:
        return _error(_validation_message(exc), 400)

    try:
        songs = get_song_service().get_songs(params.to_filter())
    except SongServiceError as exc:
        return _service_error(exc)
    return _success('songs retrieved', [song.to_dict() for song in songs])


@songs_bp.route('/<song_id>', methods=['GET'])
def get_song(song_id: str):
    try:
        song = get_song_service().get_song(song_id)
    except SongServiceError as exc:
        return _service_error(exc)
    return _success('song retrieved', song.to_dict())


@songs_bp.route('', methods=['PUT'])
def update_song():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return _error('invalid request body', 400)
    if not str(payload.get('id') or '').strip():
        return _error('id not provided', 400)
    try:
        update = SongUpdate.model_validate(payload)
    except ValidationError as exc:
        return _error(_validation_message(exc), 400)

    try:
        get_song_service().update_song(update)
    except SongServiceError as exc:
        return _service_error(exc)
    return _success('song updated')


@songs_bp.route('/<song_id>', methods=['DELETE'])
def delete_song(song_id: str):
    try:
        get_song_service().delete_song(song_id)
    except SongServiceError as exc:
        return _service_error(exc)
    return _success('song deleted')


@songs_bp.route('/lyrics/<song_id>', methods=['GET'])
def get_paginated_lyrics(song_id: str):
    page = (request.args.get('page') or '').strip()
    limit = (request.args.get('limit') or '').strip()
    if not page or not limit:
        return _error("both 'page' and 'limit' should be provided", 400)
    try:
        params = LyricsPageParams.model_validate({'page': page, 'limit': limit})
    except ValidationError as exc:
        return _error(_validation_message(exc), 400)

    try:
        verses = get_song_service().get_paginated_lyrics(song_id, params.page, params.limit)
    except SongServiceError as exc:
        return _service_error(exc)
    return _success('lyrics retrieved', [verse.to_dict() for verse in verses])


__all__ = ['songs_bp']
