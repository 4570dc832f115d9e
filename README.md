# cavsdk

A Python library for talking to the Cloud Avenue platform. It knows which
console an organization lives on, keeps a registry of API endpoints, sends
requests through the right sub-client (the Cloud Director API or the Cerberus
customer API) and can follow asynchronous jobs until they finish.

## Installation

```
pip install cavsdk
```

To run the test suite, install the test extra:

```
pip install "cavsdk[test]"
pytest
```

## Consoles

Every organization name encodes the console that hosts it. The
`cavsdk.consoles` module resolves the name and exposes that console's services.

```python
from cavsdk.consoles import check_organization_name, find_by_organization_name

check_organization_name("cav01ev01ocb0000000")   # True
check_organization_name("foobar")                # False

console = find_by_organization_name("cav01ev01ocb0000000")  # Console.CONSOLE1, or None
console.site_name()              # "Console Externe VDR"
console.location_code()          # LocationCode.VDR
console.api_vcd_endpoint()       # base URL of the Cloud Director API
console.api_cerberus_endpoint()  # base URL of the Cerberus API, "" when absent
console.services()               # a frozen Services of Service(enabled, endpoint)
```

`Console.override_endpoint(services)` replaces the whole set of service
endpoints of a console for the rest of the process, which is handy for
pointing the library at a test server.

## Endpoints

API operations are described by `cavsdk.endpoint.Endpoint` objects and
registered once, when the module defining them is imported. Each is identified
by its API, version, name and HTTP method (`Method`).
`Endpoint.register()` validates the description (name, sub-client, path
template, method, documentation URL) and raises `ValueError` when it is
incomplete.

```python
import cavsdk.api.org.v1  # registers GetOrganization
from cavsdk.endpoint import Method, get_endpoint, get_endpoints_uncategorized

endpoint = get_endpoint("GetOrganization", Method.GET, "org", "v1")
print(endpoint)   # "[org] v1 GetOrganization GET /cloudapi/1.0.0/orgs/{orgUrn}"

for ep in get_endpoints_uncategorized():
    print(ep)
```

`get_endpoint` raises `LookupError` when nothing is registered under that key.
Called without an API and version from inside `cavsdk.api.<api>.<version>`, it
takes them from the calling module.

Requests to an endpoint are shaped with the options in
`cavsdk.request_options`: `with_path_param`, `with_query_param`, `set_body`,
`override_set_result` and `set_custom_option`. Path and query parameters are
checked against the endpoint's declared parameters, required values and
validators, and a body against the endpoint's request body type; a failed
check raises `ValueError`.

## Clients

`cavsdk.client.Client` is created for an organization. The console is found
from the organization name, and an unknown name raises `ValueError`.

```python
from cavsdk.client import Client

class StaticToken:
    """A credential that always sends the same bearer token."""

    def headers(self):
        return {"Authorization": "Bearer token"}

    def refresh(self):
        pass

    def is_initialized(self):
        return True

client = Client("cav01ev01ocb0000000", credential=StaticToken())
```

The credential is any object with `headers()`, `refresh()` and
`is_initialized()` (the `cavsdk.subclients.Auth` protocol). With one, the
client sets up the Cloud Director (`VmwareClient`) and Cerberus
(`CerberusClient`) sub-clients, which share it: each adds its headers to every
request and calls `refresh()` first when `is_initialized()` is false. Without a
credential, `Client.new_request` raises `CavError("invalid client vmware")`.

`Client(..., services=Services(...))` overrides the console's endpoints, and
`Client.parse_api_error(action, resp)` turns an error response into an
`APIError` (or returns `None` for a successful one).

The organization API sits on top of a client:

```python
from cavsdk.api.org.v1 import Org

org = Org(client)
details = org.demo_request("urn:vcloud:org:00000000-0000-4000-8000-000000000000")
print(details.name, details.description)
```

`demo_request` raises `ValueError` for an organization id that is not a URN and
`APIError` when the API answers with an error.

## HTTP

`cavsdk.httpclient` holds the small HTTP layer built on `requests`:
`new_http_client()` returns an `HTTPClient` that sends the
`CloudAvenueSDK/2.0` User-Agent; `HTTPClient.new_request()` gives a `Request`
with path and query parameters, body, result and error types, retry settings
and a timeout; `Request.execute`, `get` and `post` send it and return a
`Response` whose `result` or `error` is decoded from JSON. Response
middlewares added with `HTTPClient.add_response_middleware` run on every
response.

## Jobs

Some operations run asynchronously. `cavsdk.jobs.JobOptions` sets the overall
timeout (five minutes by default) and the polling interval (fifteen seconds by
default; a non-positive one raises `ValueError`), plus an optional extractor
called on each polled response. A `Job` carries an id, name, description, href
and `JobStatus`: one of queued, running, success, error or aborted;
`JobStatus.is_terminated()` is true for the last three.

When an endpoint has job options, `Client.new_request` attaches the middleware
from `cavsdk.jobflow.new_job_middleware`, which polls the Cloud Director task
(`VmwareClient.job_refresh`) until it reaches a terminal state, using
`job_retry_condition`. Only the Cloud Director sub-client can follow jobs;
asking the Cerberus one raises `CavError`.

## Errors

All errors raised by the library itself derive from `cavsdk.errors.CavError`:

- `APIError` carries the operation, HTTP status code and message, duration
  and endpoint of a failed call; `is_not_found()` tells a 404 apart.
- `ClientError` reports a problem on the client side and may hold the
  `APIError` behind it.
- `ClientNotInitializedError` is raised when `Org` is given no client.

`is_api_error(err)` and `is_client_error(err)` test an exception's kind.
Invalid arguments raise `ValueError`, and missing registry entries `LookupError`.

## What the package does not do

- It ships no credential that logs in with a user name and password; you
  supply an object with `headers()`, `refresh()` and `is_initialized()`.
  The `SessionVmware` endpoint is registered but nothing calls it.
- It has no command-line tool; it is a library only.
- Besides the organization lookup, it wraps no other Cloud Avenue APIs.