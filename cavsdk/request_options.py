"""Options that adjust a request for an endpoint, validating against its description."""

from __future__ import annotations

from typing import Any, Callable

from .endpoint import Endpoint, EndpointRequestOption
from .httpclient import Request


def _label(endpoint: Endpoint) -> str:
    method = "" if endpoint.method is None else str(endpoint.method)
    return f"{endpoint.api} {endpoint.version} {endpoint.name} {method}"


def _check(kind: str, params: Any, name: str, value: str, endpoint: Endpoint) -> None:
    for param in params:
        if param.name != name:
            continue
        if param.required and value == "":
            raise ValueError(f"{kind} param {name} is required for endpoint {_label(endpoint)}")
        if param.validator_func is not None and value != "":
            try:
                param.validator_func(value)
            except (ValueError, TypeError) as exc:
                raise ValueError(
                    f"{kind} param {name} validation failed for endpoint {_label(endpoint)}: {exc}"
                ) from exc


def with_path_param(path_param: Any, value: str) -> EndpointRequestOption:
    """Fill the path placeholder ``path_param`` with ``value``."""

    def apply(endpoint: Endpoint, request: Request) -> None:
        if endpoint.path_params is None:
            raise ValueError(f"endpoint {_label(endpoint)} has no path params")
        _check("path", endpoint.path_params, path_param.name, value, endpoint)
        request.path_params[path_param.name] = value

    return apply


def with_query_param(query_param: Any, value: str) -> EndpointRequestOption:
    """Add the query parameter ``query_param`` with ``value``."""

    def apply(endpoint: Endpoint, request: Request) -> None:
        if endpoint.query_params is None:
            raise ValueError(f"endpoint {_label(endpoint)} has no query params")
        _check("query", endpoint.query_params, query_param.name, value, endpoint)
        request.query_params[query_param.name] = value

    return apply


def override_set_result(result_type: Any) -> EndpointRequestOption:
    """Decode a successful response into ``result_type`` instead of the endpoint's."""

    def apply(endpoint: Endpoint, request: Request) -> None:
        if result_type is None:
            raise ValueError(f"result type cannot be nil for endpoint {_label(endpoint)}")
        request.result_type = result_type

    return apply


def _type_name(kind: type) -> str:
    return f"{kind.__module__}.{kind.__qualname__}"


def set_body(body: Any) -> EndpointRequestOption:
    """Send ``body``, which must match the endpoint's request body type when it has one."""

    def apply(endpoint: Endpoint, request: Request) -> None:
        if body is None:
            raise ValueError(f"body cannot be nil for endpoint {_label(endpoint)}")
        expected = endpoint.body_request_type
        if expected is not None:
            expected_type = expected if isinstance(expected, type) else type(expected)
            actual_type = type(body)
            if actual_type is not expected_type:
                raise ValueError(
                    f"body must be of type {_type_name(expected_type)} "
                    f"(not {_type_name(actual_type)}) for endpoint {_label(endpoint)}"
                )
        request.body = body

    return apply


def set_custom_option(option: Callable[[Request], None]) -> EndpointRequestOption:
    """Run ``option`` on the request as is."""

    def apply(_endpoint: Endpoint, request: Request) -> None:
        option(request)

    return apply