from dataclasses import dataclass

import pytest

from cavsdk.endpoint import Endpoint, Method, PathParam, QueryParam
from cavsdk.httpclient import new_http_client
from cavsdk.request_options import (
    override_set_result,
    set_body,
    set_custom_option,
    with_path_param,
    with_query_param,
)


@dataclass
class DummyBody:
    foo: str


def _request():
    return new_http_client().new_request()


def _endpoint(method=Method.GET, **fields):
    return Endpoint(api="cat", version="v1", name="name", method=method, **fields)


def _reject(_value):
    raise ValueError("invalid value")


def test_set_body_nil_body():
    endpoint = _endpoint(Method.POST, body_request_type=DummyBody)
    with pytest.raises(ValueError, match="body cannot be nil for endpoint cat v1 name POST"):
        set_body(None)(endpoint, _request())


def test_set_body_type_mismatch():
    endpoint = _endpoint(Method.POST, body_request_type=DummyBody)
    request = _request()
    with pytest.raises(ValueError, match="body must be of type"):
        set_body("not a struct")(endpoint, request)
    assert request.body is None


def test_set_body_type_match():
    endpoint = _endpoint(Method.POST, body_request_type=DummyBody)
    request = _request()
    body = DummyBody(foo="bar")
    set_body(body)(endpoint, request)
    assert request.body == DummyBody(foo="bar")


def test_set_body_type_given_as_instance():
    endpoint = _endpoint(Method.POST, body_request_type=DummyBody(foo=""))
    request = _request()
    set_body(DummyBody(foo="bar"))(endpoint, request)
    assert request.body.foo == "bar"


def test_set_body_no_body_request_type():
    endpoint = _endpoint(Method.POST, body_request_type=None)
    request = _request()
    set_body(DummyBody(foo="bar"))(endpoint, request)
    assert request.body == DummyBody(foo="bar")


def test_with_query_param_no_query_params():
    endpoint = _endpoint(query_params=None)
    with pytest.raises(ValueError, match="has no query params"):
        with_query_param(QueryParam(name="foo"), "bar")(endpoint, _request())


def test_with_query_param_required_missing():
    endpoint = _endpoint(query_params=[QueryParam(name="foo", required=True)])
    with pytest.raises(ValueError, match="query param foo is required"):
        with_query_param(QueryParam(name="foo", required=True), "")(endpoint, _request())


def test_with_query_param_validator_fails():
    endpoint = _endpoint(query_params=[QueryParam(name="foo", validator_func=_reject)])
    with pytest.raises(ValueError, match="validation failed.*invalid value"):
        with_query_param(QueryParam(name="foo", validator_func=_reject), "bad")(
            endpoint, _request()
        )


def test_with_query_param_success():
    endpoint = _endpoint(query_params=[QueryParam(name="foo")])
    request = _request()
    with_query_param(QueryParam(name="foo"), "bar")(endpoint, request)
    assert request.query_params["foo"] == "bar"


def test_override_set_result_nil():
    with pytest.raises(ValueError, match="result type cannot be nil"):
        override_set_result(None)(_endpoint(), _request())


def test_override_set_result_success():
    request = _request()
    override_set_result(DummyBody)(_endpoint(), request)
    assert request.result_type is DummyBody


def test_with_path_param_no_path_params():
    endpoint = _endpoint(path_params=None)
    with pytest.raises(ValueError, match="has no path params"):
        with_path_param(PathParam(name="foo"), "bar")(endpoint, _request())


def test_with_path_param_required_missing():
    endpoint = _endpoint(path_params=[PathParam(name="foo", required=True)])
    with pytest.raises(ValueError, match="path param foo is required"):
        with_path_param(PathParam(name="foo", required=True), "")(endpoint, _request())


def test_with_path_param_validator_fails():
    endpoint = _endpoint(path_params=[PathParam(name="foo", validator_func=_reject)])
    with pytest.raises(ValueError, match="path param foo validation failed"):
        with_path_param(PathParam(name="foo", validator_func=_reject), "bad")(
            endpoint, _request()
        )


def test_with_path_param_validator_skipped_for_empty_value():
    endpoint = _endpoint(path_params=[PathParam(name="foo", validator_func=_reject)])
    request = _request()
    with_path_param(PathParam(name="foo"), "")(endpoint, request)
    assert request.path_params["foo"] == ""


def test_with_path_param_success():
    endpoint = _endpoint(path_params=[PathParam(name="foo")])
    request = _request()
    with_path_param(PathParam(name="foo"), "bar")(endpoint, request)
    assert request.path_params["foo"] == "bar"


def test_set_custom_option_runs_on_request():
    request = _request()
    set_custom_option(lambda r: r.headers.update({"X-Trace": "abc"}))(_endpoint(), request)
    assert request.headers["X-Trace"] == "abc"