"""Waiting on asynchronous jobs: response middlewares and the polling retry rule."""

from __future__ import annotations

import logging
from typing import Optional

from .httpclient import HTTPClient, Request, Response, ResponseMiddleware, RetryCondition
from .jobs import ExtractorFunc, JobOptions
from .request_options import set_custom_option
from .subclients import JobsCapable

logger = logging.getLogger(__name__)


def new_job_middleware(
    http_client: HTTPClient, subclient: JobsCapable, job_options: Optional[JobOptions]
) -> ResponseMiddleware:
    """A middleware that polls the job behind a response until it terminates.

    ``http_client`` must not be the client running this middleware, or polling
    would start itself again.
    """

    def middleware(_client: HTTPClient, response: Response) -> None:
        if job_options is None:
            raise ValueError("job options cannot be None, pass a JobOptions instance")

        if job_options.extractor_func is not None:
            http_client.add_response_middleware(extractor_middleware(job_options.extractor_func))

        timeout = job_options.timeout
        interval = job_options.poll_interval
        context = dict(response.request.context)

        def configure(request: Request) -> None:
            request.context = dict(context)
            request.retry_conditions = [job_retry_condition(subclient)]
            request.retry_wait_time = interval
            request.retry_max_wait_time = timeout
            # e.g. 5 minutes polled every 15 seconds gives 20 retries.
            request.retry_count = int(timeout / interval)
            request.timeout = timeout

        job = subclient.job_refresh(http_client, response, [set_custom_option(configure)])
        if job is not None:
            logger.info("Job completed, status: %s", job.status)

    return middleware


def job_retry_condition(subclient: JobsCapable) -> RetryCondition:
    """Retry while the polled job has not reached a terminal state."""

    def condition(response: Optional[Response], error: Optional[BaseException]) -> bool:
        if response is not None:
            logger.debug(
                "Retrying job status check, retry count: %d, retry wait time: %s",
                response.request.attempt,
                response.request.retry_wait_time,
            )
        if error is not None:
            logger.debug("Error occurred while waiting for job response: %s", error)
            return False
        if response is None:
            return False
        try:
            job = subclient.job_parser(response)
        except Exception as exc:
            logger.debug("Failed to parse job response: %s", exc)
            return False
        if job is None:
            logger.debug("Job response is empty, stopping retries")
            return False
        logger.debug("Job response status: %s", job.status)
        return job.status is None or not job.status.is_terminated()

    return condition


def extractor_middleware(extractor_func: Optional[ExtractorFunc]) -> ResponseMiddleware:
    """A middleware handing every response to ``extractor_func``."""

    def middleware(_client: HTTPClient, response: Response) -> None:
        if extractor_func is not None:
            extractor_func(response)

    return middleware