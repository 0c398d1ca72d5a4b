"""OpenAPI 3.1 description of the song endpoints.

Schemas come from the same pydantic models the routes validate and serialize
with, so the document cannot drift from what ``/songs`` accepts.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, List, Type

from flask import Blueprint, Response, jsonify, url_for
from pydantic import BaseModel
from pydantic.json_schema import models_json_schema

from songlib.models.dto import (
    ErrorResponse,
    LyricsPageParams,
    LyricsVerseDTO,
    SongCreate,
    SongDTO,
    SongQueryParams,
    SongUpdate,
    SuccessResponse,
)

openapi_bp = Blueprint('openapi_bp', __name__)

API_TITLE = "Song Library Service"
API_VERSION = "1.0"
API_DESCRIPTION = "Service for managing songs, their groups and verse-split lyrics in the library."

_SCHEMA_MODELS = (
    (SongCreate, "validation"),
    (SongUpdate, "validation"),
    (SongDTO, "serialization"),
    (LyricsVerseDTO, "serialization"),
    (SuccessResponse, "serialization"),
    (ErrorResponse, "serialization"),
)

_SONG_ID = {
    "name": "song_id",
    "in": "path",
    "required": True,
    "schema": {"type": "string"},
}


def _ref(model: Type[BaseModel]) -> Dict[str, str]:
    return {"$ref": f"#/components/schemas/{model.__name__}"}


def _envelope(data_schema: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": {"message": {"type": "string"}, "data": data_schema},
        "required": ["message", "data"],
    }


def _json(schema: Dict[str, Any]) -> Dict[str, Any]:
    return {"application/json": {"schema": schema}}


def _query_parameters(model: Type[BaseModel], descriptions: Dict[str, str]) -> List[Dict[str, Any]]:
    schema = model.model_json_schema(by_alias=True)
    required = set(schema.get("required", ()))
    return [
        {
            "name": name,
            "in": "query",
            "required": name in required,
            "description": descriptions.get(name, ""),
            "schema": {k: v for k, v in prop.items() if k != "title"},
        }
        for name, prop in schema["properties"].items()
    ]


def _operation(summary: str, description: str, tag: str, ok: Dict[str, Any], *,
               parameters=None, body: Type[BaseModel] = None) -> Dict[str, Any]:
    operation: Dict[str, Any] = {
        "summary": summary,
        "description": description,
        "tags": [tag],
        "responses": {
            "200": {"description": "Success", "content": _json(ok)},
            "400": {"description": "Invalid input, unknown song or duplicate", "content": _json(_ref(ErrorResponse))},
            "500": {"description": "Internal or external detail service failure", "content": _json(_ref(ErrorResponse))},
        },
    }
    if parameters:
        operation["parameters"] = parameters
    if body is not None:
        operation["requestBody"] = {"required": True, "content": _json(_ref(body))}
    return operation


@lru_cache(maxsize=1)
def build_openapi_document() -> Dict[str, Any]:
    _, definitions = models_json_schema(_SCHEMA_MODELS, ref_template="#/components/schemas/{model}")

    filter_params = _query_parameters(SongQueryParams, {
        "title": "Case-insensitive substring of the title",
        "group": "Case-insensitive substring of the group name",
        "link": "Exact link",
        "text": "Case-insensitive substring of any verse",
        "startDate": "Earliest release date (YYYY-MM-DD); requires endDate",
        "endDate": "Latest release date (YYYY-MM-DD); requires startDate",
        "page": "1-based page; requires limit",
        "limit": "Songs per page; requires page",
    })
    lyrics_params = [_SONG_ID] + _query_parameters(LyricsPageParams, {
        "page": "1-based page of verses",
        "limit": "Verses per page",
    })
    acknowledged = _ref(SuccessResponse)

    return {
        "openapi": "3.1.0",
        "info": {"title": API_TITLE, "version": API_VERSION, "description": API_DESCRIPTION},
        "paths": {
            "/songs": {
                "post": _operation(
                    "Create a song",
                    "Creates a song for the group (created when unknown) and fills release date, "
                    "link and lyrics from the external detail service.",
                    "songs",
                    _envelope({"type": "object", "properties": {"id": {"type": "string"}}, "required": ["id"]}),
                    body=SongCreate,
                ),
                "get": _operation(
                    "Search songs",
                    "Lists songs matching every supplied filter, optionally paginated.",
                    "songs",
                    _envelope({"type": "array", "items": _ref(SongDTO)}),
                    parameters=filter_params,
                ),
                "put": _operation(
                    "Update a song",
                    "Changes only the supplied fields; lyrics, when supplied, replace every verse.",
                    "songs",
                    acknowledged,
                    body=SongUpdate,
                ),
            },
            "/songs/{song_id}": {
                "get": _operation(
                    "Get a song", "Returns one song with its full lyrics.", "songs",
                    _envelope(_ref(SongDTO)), parameters=[_SONG_ID],
                ),
                "delete": _operation(
                    "Delete a song", "Deletes the song and all of its verses.", "songs",
                    acknowledged, parameters=[_SONG_ID],
                ),
            },
            "/songs/lyrics/{song_id}": {
                "get": _operation(
                    "Get paginated lyrics",
                    "Returns one page of numbered verses; an unknown song yields an empty page.",
                    "lyrics",
                    _envelope({"type": "array", "items": _ref(LyricsVerseDTO)}),
                    parameters=lyrics_params,
                ),
            },
        },
        "components": {"schemas": definitions.get("$defs", {})},
    }


@openapi_bp.route('/openapi.json')
def openapi_json():
    return jsonify(build_openapi_document())


_DOCS_PAGE = """<!DOCTYPE html>
<html>
<head>
  <title>{title}</title>
  <link rel="stylesheet" href="https://unpkg.com/swagger-ui-dist@5/swagger-ui.css">
</head>
<body>
  <div id="swagger-ui"></div>
  <script src="https://unpkg.com/swagger-ui-dist@5/swagger-ui-bundle.js"></script>
  <script>SwaggerUIBundle({{url: "{spec_url}", dom_id: "#swagger-ui"}});</script>
</body>
</html>
"""


@openapi_bp.route('/docs')
def docs():
    page = _DOCS_PAGE.format(title=API_TITLE, spec_url=url_for('openapi_bp.openapi_json'))
    return Response(page, mimetype='text/html')


__all__ = ['openapi_bp', 'build_openapi_document']
