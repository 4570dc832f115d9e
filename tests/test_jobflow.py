from datetime import timedelta

import pytest
import responses

from cavsdk.consoles import Console
from cavsdk.endpoint import Endpoint
from cavsdk.errors import APIError, CavError
from cavsdk.httpclient import HTTPClient, Response
from cavsdk.jobflow import extractor_middleware, job_retry_condition, new_job_middleware
from cavsdk.jobs import Job, JobOptions, JobStatus
from cavsdk.subclients import VmwareClient

TASK_ID = "0b6f3f3a-5a77-4c35-9d43-1f5f1a7e2b10"


class FakeJobs:
    def __init__(self, job=None, error=None):
        self.job = job
        self.error = error
        self.refresh_calls = []

    def job_refresh(self, http_client, resp, request_options):
        self.refresh_calls.append((http_client, resp, list(request_options)))
        if self.error is not None:
            raise self.error
        return self.job

    def job_parser(self, resp):
        if self.error is not None:
            raise self.error
        return self.job

    def job_status_parser(self, status):
        return JobStatus(status)


class FakeAuth:
    def headers(self):
        return {"Authorization": "Bearer token"}

    def refresh(self):
        pass

    def is_initialized(self):
        return True


def _response(client=None, headers=None, context=None):
    client = client or HTTPClient("https://vcd.example.com")
    request = client.new_request()
    request.context = dict(context or {})
    return Response(
        request=request,
        status_code=202,
        headers=headers or {},
        body=b"",
        duration=timedelta(0),
    )


@pytest.fixture
def rsps():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as mock:
        yield mock


def test_middleware_requires_options():
    client = HTTPClient()
    middleware = new_job_middleware(client, FakeJobs(job=Job()), None)
    with pytest.raises(ValueError, match="job options"):
        middleware(client, _response(client))


def test_middleware_configures_polling():
    client = HTTPClient()
    fake = FakeJobs(job=Job(status=JobStatus.SUCCESS))
    middleware = new_job_middleware(client, fake, JobOptions())
    resp = _response(client, context={"trace": "abc"})
    middleware(client, resp)

    http_client, passed_resp, options = fake.refresh_calls[0]
    assert http_client is client
    assert passed_resp is resp
    request = client.new_request()
    for option in options:
        option(Endpoint(), request)
    assert request.retry_count == 20
    assert request.retry_wait_time == timedelta(seconds=15)
    assert request.retry_max_wait_time == timedelta(minutes=5)
    assert request.timeout == timedelta(minutes=5)
    assert request.context == {"trace": "abc"}
    assert len(request.retry_conditions) == 1


def test_middleware_propagates_refresh_error():
    client = HTTPClient()
    fake = FakeJobs(error=APIError(message="job failed"))
    middleware = new_job_middleware(client, fake, JobOptions())
    with pytest.raises(APIError, match="job failed"):
        middleware(client, _response(client))


def test_middleware_registers_extractor():
    client = HTTPClient()
    seen = []
    options = JobOptions(extractor_func=seen.append)
    before = len(client.response_middlewares)
    middleware = new_job_middleware(client, FakeJobs(job=Job()), options)
    resp = _response(client)
    middleware(client, resp)
    assert len(client.response_middlewares) == before + 1
    client.response_middlewares[-1](client, resp)
    assert seen == [resp]


def test_middleware_without_extractor_adds_nothing():
    client = HTTPClient()
    before = len(client.response_middlewares)
    new_job_middleware(client, FakeJobs(job=Job()), JobOptions())(client, _response(client))
    assert len(client.response_middlewares) == before


def test_retry_condition_stops_on_error():
    condition = job_retry_condition(FakeJobs(job=Job(status=JobStatus.RUNNING)))
    assert condition(_response(), CavError("network error")) is False


def test_retry_condition_stops_on_parse_error():
    condition = job_retry_condition(FakeJobs(error=CavError("parse error")))
    assert condition(_response(), None) is False


def test_retry_condition_stops_without_response():
    condition = job_retry_condition(FakeJobs(job=Job(status=JobStatus.RUNNING)))
    assert condition(None, None) is False


def test_retry_condition_stops_without_job():
    assert job_retry_condition(FakeJobs(job=None))(_response(), None) is False


@pytest.mark.parametrize(
    "status, retry",
    [
        (JobStatus.QUEUED, True),
        (JobStatus.RUNNING, True),
        (JobStatus.SUCCESS, False),
        (JobStatus.ERROR, False),
        (JobStatus.ABORTED, False),
    ],
)
def test_retry_condition_follows_status(status, retry):
    condition = job_retry_condition(FakeJobs(job=Job(status=status)))
    assert condition(_response(), None) is retry


def test_retry_condition_retries_job_without_status():
    condition = job_retry_condition(FakeJobs(job=Job(id=TASK_ID)))
    assert condition(_response(), None) is True


def test_extractor_middleware_calls_function():
    seen = []
    resp = _response()
    extractor_middleware(seen.append)(HTTPClient(), resp)
    assert seen == [resp]


def test_polls_until_job_terminates(rsps):
    sc = VmwareClient(credential=FakeAuth(), console=Console.CONSOLE1)
    client = sc.new_http_client()
    task_url = client.base_url + "/api/task/" + TASK_ID
    rsps.add(responses.GET, task_url, json={"id": "urn:vcloud:task:" + TASK_ID, "status": "running"})
    rsps.add(responses.GET, task_url, json={"id": "urn:vcloud:task:" + TASK_ID, "status": "success"})

    options = JobOptions(timeout=timedelta(seconds=1), poll_interval=timedelta(milliseconds=10))
    middleware = new_job_middleware(client, sc, options)
    middleware(client, _response(client, headers={"Location": task_url}))

    assert len(rsps.calls) == 2
    assert rsps.calls[0].request.headers["Authorization"] == "Bearer token"


def test_failed_job_raises_api_error(rsps):
    sc = VmwareClient(credential=FakeAuth(), console=Console.CONSOLE1)
    client = sc.new_http_client()
    task_url = client.base_url + "/api/task/" + TASK_ID
    rsps.add(
        responses.GET,
        task_url,
        json={
            "id": "urn:vcloud:task:" + TASK_ID,
            "status": "error",
            "href": task_url,
            "error": {"message": "boom", "majorErrorCode": 500, "minorErrorCode": "INTERNAL"},
        },
    )
    options = JobOptions(timeout=timedelta(seconds=1), poll_interval=timedelta(milliseconds=10))
    middleware = new_job_middleware(client, sc, options)
    with pytest.raises(APIError) as info:
        middleware(client, _response(client, headers={"Location": task_url}))
    assert info.value.message == "boom"
    assert info.value.endpoint == task_url
    assert len(rsps.calls) == 1