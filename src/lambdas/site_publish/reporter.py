# src/lambdas/site_publish/reporter.py
import logging

logger = logging.getLogger(__name__)

SUCCESS_RESULT = "Done"
FAILURE_RESULT = "Failed - see cloudwatch logs for more details."

# CodePipeline rejects failureDetails.message longer than this
MAX_MESSAGE_LENGTH = 5000


def describe(reason) -> str:
    if isinstance(reason, BaseException):
        text = f"{type(reason).__name__}: {reason}"
    else:
        text = str(reason)
    if len(text) > MAX_MESSAGE_LENGTH:
        text = text[:MAX_MESSAGE_LENGTH - 3] + "..."
    return text


class JobReporter:
    """
    Sends the job's single success or failure result to CodePipeline.

    Both methods return the Lambda completion value. The handler returns it
    instead of raising, so a failed job never turns into a Lambda error that
    the platform would retry (re-running the publish).
    """

    def __init__(self, client, job_id: str, invocation_id: str = ""):
        self.client = client
        self.job_id = job_id
        self.invocation_id = invocation_id
        self.outcome = None

    def _claim(self, outcome: str):
        if self.outcome is not None:
            raise RuntimeError(f"job {self.job_id} already reported as {self.outcome}")
        self.outcome = outcome

    def report_success(self) -> str:
        self._claim("success")
        logger.info("Sending success for job %s", self.job_id)
        self.client.put_job_success_result(jobId=self.job_id)
        return SUCCESS_RESULT

    def report_failure(self, reason) -> str:
        self._claim("failure")
        message = describe(reason)
        logger.error("Error occurred, sending failure for job %s: %s", self.job_id, message)
        details = {"message": message, "type": "JobFailed"}
        if self.invocation_id:
            details["externalExecutionId"] = self.invocation_id
        self.client.put_job_failure_result(jobId=self.job_id, failureDetails=details)
        return FAILURE_RESULT
