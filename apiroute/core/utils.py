"""
Route pipeline utility module.
"""

import json
import logging
from datetime import date, time
from typing import Any, Dict, List, Union

from fastapi import Request
from pydantic_core import to_json

from .exceptions import HttpBadRequestError

logger = logging.getLogger("apiroute.utils")

ResolvedSearchParams = Dict[str, Union[str, List[str]]]


def search_params_to_json(request: Request) -> ResolvedSearchParams:
    """
    Convert the multi-valued query string into a plain mapping.

    A key with one value maps to that string, a key with several values maps
    to the ordered list of them, and a key without values is omitted.
    """
    query: ResolvedSearchParams = {}
    for key in request.query_params.keys():
        values = request.query_params.getlist(key)
        if len(values) == 1:
            query[key] = values[0]
        elif len(values) > 1:
            query[key] = values
    return query


async def read_json_body(request: Request) -> Any:
    """
    Default body reader.

    Returns:
        None for an empty body, the decoded JSON document otherwise

    Raises:
        HttpBadRequestError: the body is not valid JSON
    """
    raw = await request.body()
    if not raw:
        return None

    try:
        return json.loads(raw)
    except ValueError as e:
        logger.debug("Failed to decode request body as JSON", extra={"error_detail": str(e)})
        raise HttpBadRequestError("INVALID_JSON") from e


def convert_model_to_json(value: Any) -> Any:
    """
    Round-trip a value through JSON encoding.

    Collapses models, dataclasses, dates, enums and other rich types into
    plain dicts, lists, strings and numbers.
    """
    return json.loads(to_json(value))


def sanitize_json_to_client(value: Any) -> Any:
    """
    Return a copy of a JSON-like value without any key starting with "_".

    Applied depth-first through mappings and lists. Scalars and date-like
    values are returned as they are. The input is never modified.
    """
    if value is None or isinstance(value, (str, bytes, int, float, date, time)):
        return value

    if isinstance(value, dict):
        return {
            k: sanitize_json_to_client(v)
            for k, v in value.items()
            if not (isinstance(k, str) and k.startswith("_"))
        }

    if isinstance(value, list):
        return [sanitize_json_to_client(v) for v in value]

    if isinstance(value, tuple):
        return tuple(sanitize_json_to_client(v) for v in value)

    return value
