# src/lambdas/site_publish/app.py
# CodePipeline invoke action: publish a subtree of the source artifact to an
# S3 static website bucket.
#
# Action UserParameters:
#   'artifact'                 : name of the input artifact holding the site (zip).
#   's3StaticSiteBucket'       : destination bucket for the static website.
#   's3StaticSiteBucketRegion' : region of that bucket.
#   'sourceDirectory'          : directory inside the artifact to publish (no trailing slash).
import logging
import tempfile
from pathlib import Path
from typing import List

# import modules (so tests can monkeypatch attributes)
from . import aws
from . import extract
from . import fetch
from . import params
from . import publish
from .config import Settings
from .errors import PublishError
from .models import JobContext, UploadOutcome
from .reporter import FAILURE_RESULT, JobReporter

logger = logging.getLogger()
logger.setLevel(logging.INFO)

ARCHIVE_NAME = "artifact.zip"
EXTRACT_DIR = "extracted"


def run_pipeline(job: JobContext, settings: Settings) -> List[UploadOutcome]:
    parameters = params.resolve_parameters(job.user_parameters)
    location = params.locate_artifact(job.input_artifacts, parameters.artifact_name)
    source = aws.source_s3_client(job.credentials)

    with tempfile.TemporaryDirectory(prefix="site-publish-", dir=settings.staging_root) as tmp:
        staging_dir = Path(tmp)
        archive_path = fetch.download_artifact(source, location, staging_dir / ARCHIVE_NAME)
        files = extract.extract_subtree(archive_path, parameters.source_subtree_prefix, staging_dir / EXTRACT_DIR)

        destination = aws.destination_s3_client(parameters.destination_region)
        return publish.publish_files(destination, parameters.destination_bucket, files,
                                     max_workers=settings.max_upload_workers)


def _deliver(send, *args) -> str:
    try:
        return send(*args)
    except Exception:
        # still complete cleanly; a Lambda error would re-run the publish
        logger.exception("Could not deliver job result to CodePipeline")
        return FAILURE_RESULT


def lambda_handler(event, context):
    try:
        job_id = JobContext.job_id_from_event(event)
        if not job_id:
            logger.error("Invoked without a CodePipeline job id; nothing to report")
            return FAILURE_RESULT
        reporter = JobReporter(aws.codepipeline_client(), job_id, getattr(context, "aws_request_id", "") or "")
    except Exception:
        # no way to reach CodePipeline; still complete cleanly
        logger.exception("Could not set up job reporting")
        return FAILURE_RESULT

    try:
        settings = Settings.from_env()
        logger.setLevel(settings.log_level)
        job = JobContext.from_event(event, context)
        outcomes = run_pipeline(job, settings)
    except PublishError as e:
        logger.error("Job %s failed in %s stage: %s", job_id, e.stage, e)
        return _deliver(reporter.report_failure, e)
    except Exception as e:
        logger.exception("Job %s failed unexpectedly", job_id)
        return _deliver(reporter.report_failure, e)

    logger.info("Job %s published %d file(s)", job_id, len(outcomes))
    return _deliver(reporter.report_success)
