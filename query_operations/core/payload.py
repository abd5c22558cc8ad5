"""
Query Payload

Converts QueryRequest objects to and from the request body the Endee query
engine accepts:

    {
        "vector": [0.1, 0.2, 0.3],
        "topK": 10,
        "filter": [{"category": {"$eq": "tech"}}],
        "ef": 128,
        "includeVectors": false,
        "prefilterCardinalityThreshold": 10000,
        "filterBoostPercentage": 0
    }

prepare_query() is the submit boundary: it validates the request and only
then produces the payload.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from config.settings import QuerySettings
from ..models.request import QueryRequest
from ..query_ops_exceptions import InvalidQueryParametersError
from .validator import QueryValidator

logger = logging.getLogger(__name__)


def to_payload(request: QueryRequest) -> Dict[str, Any]:
    """
    Convert a request to its wire shape.

    Unset optional fields and an empty filter list are left out; fields with
    defaults are always present.
    """
    payload = request.model_dump(by_alias=True, exclude_none=True)
    if not payload.get("filter"):
        payload.pop("filter", None)
    return payload


def from_payload(payload: Mapping[str, Any]) -> QueryRequest:
    """
    Build a request from a wire payload.

    Keys may be camelCase (as sent on the wire) or snake_case.

    Raises:
        InvalidQueryParametersError: If the payload has unknown keys or values
            that cannot be converted
    """
    try:
        return QueryRequest.model_validate(dict(payload))
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        raise InvalidQueryParametersError(
            f"Invalid query payload: {'; '.join(errors)}", errors=errors
        ) from e


def prepare_query(
    request: QueryRequest,
    settings: Optional[QuerySettings] = None
) -> Dict[str, Any]:
    """
    Validate a request and return the payload to submit.

    Args:
        request: Request to submit
        settings: Limits to validate against; defaults apply when omitted

    Returns:
        Wire payload for the request

    Raises:
        InvalidQueryParametersError: If the request fails validation
    """
    QueryValidator.validate_request(request, settings)
    payload = to_payload(request)
    logger.debug("Prepared query payload with keys: %s", sorted(payload))
    return payload
