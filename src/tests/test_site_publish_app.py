from unittest.mock import Mock

import pytest

from src.lambdas.site_publish import app, aws
from src.lambdas.site_publish.reporter import FAILURE_RESULT, SUCCESS_RESULT
from src.tests.site_helpers import (
    ARTIFACT_BUCKET, ARTIFACT_KEY, JOB_ID, SITE_BUCKET, SITE_ENTRIES, make_event, make_zip,
)


class FakeContext:
    aws_request_id = "invoke-123"


@pytest.fixture
def codepipeline(monkeypatch):
    client = Mock()
    monkeypatch.setattr(aws, "codepipeline_client", lambda: client)
    return client


@pytest.fixture
def pipeline_s3(s3):
    s3.put_object(Bucket=ARTIFACT_BUCKET, Key=ARTIFACT_KEY, Body=make_zip(SITE_ENTRIES))
    s3.create_bucket(Bucket=SITE_BUCKET)
    return s3


def _site_keys(s3):
    return sorted(o["Key"] for o in s3.list_objects_v2(Bucket=SITE_BUCKET).get("Contents", []))


def test_publishes_site_and_reports_success(pipeline_s3, codepipeline):
    result = app.lambda_handler(make_event(), FakeContext())

    assert result == SUCCESS_RESULT
    codepipeline.put_job_success_result.assert_called_once_with(jobId=JOB_ID)
    codepipeline.put_job_failure_result.assert_not_called()
    assert _site_keys(pipeline_s3) == ["site/css/style.css", "site/img/logo.png", "site/index.html"]
    logo = pipeline_s3.get_object(Bucket=SITE_BUCKET, Key="site/img/logo.png")
    assert logo["ContentType"] == "image/png"
    assert logo["Body"].read() == SITE_ENTRIES["site/img/logo.png"]


def test_rerun_is_idempotent(pipeline_s3, codepipeline):
    assert app.lambda_handler(make_event(), FakeContext()) == SUCCESS_RESULT
    first = {k: pipeline_s3.get_object(Bucket=SITE_BUCKET, Key=k)["Body"].read() for k in _site_keys(pipeline_s3)}

    assert app.lambda_handler(make_event(), FakeContext()) == SUCCESS_RESULT
    second = {k: pipeline_s3.get_object(Bucket=SITE_BUCKET, Key=k)["Body"].read() for k in _site_keys(pipeline_s3)}

    assert first == second
    assert codepipeline.put_job_success_result.call_count == 2


def test_staging_dir_is_removed(pipeline_s3, codepipeline, tmp_path):
    app.lambda_handler(make_event(), FakeContext())
    assert not any(p.name.startswith("site-publish-") for p in tmp_path.iterdir())


def test_bad_parameters_fail_before_any_io(aws_env, codepipeline, monkeypatch):
    source = Mock(side_effect=AssertionError("no I/O expected"))
    monkeypatch.setattr(aws, "source_s3_client", source)
    monkeypatch.setattr(aws, "destination_s3_client", source)
    staging = Mock(side_effect=AssertionError("no staging expected"))
    monkeypatch.setattr(app.tempfile, "TemporaryDirectory", staging)

    result = app.lambda_handler(make_event({"artifact": "SourceArtifact"}), FakeContext())

    assert result == FAILURE_RESULT
    source.assert_not_called()
    staging.assert_not_called()
    codepipeline.put_job_success_result.assert_not_called()
    codepipeline.put_job_failure_result.assert_called_once()
    kwargs = codepipeline.put_job_failure_result.call_args.kwargs
    assert kwargs["jobId"] == JOB_ID
    assert kwargs["failureDetails"]["type"] == "JobFailed"
    assert kwargs["failureDetails"]["externalExecutionId"] == "invoke-123"
    assert kwargs["failureDetails"]["message"].startswith("ConfigurationError:")


def test_unknown_artifact_reports_failure_once(pipeline_s3, codepipeline):
    event = make_event()
    event["CodePipeline.job"]["data"]["inputArtifacts"][0]["name"] = "BuildOutput"

    assert app.lambda_handler(event, FakeContext()) == FAILURE_RESULT
    codepipeline.put_job_failure_result.assert_called_once()
    assert "SourceNotFoundError" in codepipeline.put_job_failure_result.call_args.kwargs["failureDetails"]["message"]
    codepipeline.put_job_success_result.assert_not_called()


def test_upload_failure_reports_failure_once(s3, codepipeline):
    # website bucket is never created
    s3.put_object(Bucket=ARTIFACT_BUCKET, Key=ARTIFACT_KEY, Body=make_zip(SITE_ENTRIES))

    assert app.lambda_handler(make_event(), FakeContext()) == FAILURE_RESULT
    codepipeline.put_job_failure_result.assert_called_once()
    assert "UploadError" in codepipeline.put_job_failure_result.call_args.kwargs["failureDetails"]["message"]
    codepipeline.put_job_success_result.assert_not_called()


def test_corrupt_artifact_reports_failure(s3, codepipeline):
    s3.put_object(Bucket=ARTIFACT_BUCKET, Key=ARTIFACT_KEY, Body=b"garbage")

    assert app.lambda_handler(make_event(), FakeContext()) == FAILURE_RESULT
    assert "ExtractionError" in codepipeline.put_job_failure_result.call_args.kwargs["failureDetails"]["message"]


def test_orchestrator_error_still_completes_cleanly(pipeline_s3, codepipeline):
    codepipeline.put_job_success_result.side_effect = RuntimeError("throttled")

    assert app.lambda_handler(make_event(), FakeContext()) == FAILURE_RESULT
    codepipeline.put_job_failure_result.assert_not_called()


def test_event_without_job_id(aws_env, codepipeline):
    assert app.lambda_handler({}, FakeContext()) == FAILURE_RESULT
    codepipeline.put_job_success_result.assert_not_called()
    codepipeline.put_job_failure_result.assert_not_called()


def test_invalid_worker_setting_reports_failure(aws_env, codepipeline, monkeypatch):
    monkeypatch.setenv("MAX_UPLOAD_WORKERS", "lots")
    assert app.lambda_handler(make_event(), FakeContext()) == FAILURE_RESULT
    codepipeline.put_job_failure_result.assert_called_once()


def test_unusable_region_still_completes_cleanly(aws_env, monkeypatch):
    monkeypatch.setenv("AWS_REGION", "not a region!")
    assert app.lambda_handler(make_event(), FakeContext()) == FAILURE_RESULT


@pytest.mark.parametrize("event", [None, [], "CodePipeline.job", {"CodePipeline.job": "job"}])
def test_malformed_event_completes_cleanly(aws_env, codepipeline, event):
    assert app.lambda_handler(event, FakeContext()) == FAILURE_RESULT
    codepipeline.put_job_failure_result.assert_not_called()
