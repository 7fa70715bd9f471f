import boto3
import pytest
from moto import mock_aws

from src.tests.site_helpers import ARTIFACT_BUCKET


@pytest.fixture
def aws_env(monkeypatch, tmp_path):
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("STAGING_ROOT", str(tmp_path))
    for name in ("AWS_REGION", "AWS_ENDPOINT_URL_S3", "MAX_UPLOAD_WORKERS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def s3(aws_env):
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket=ARTIFACT_BUCKET)
        yield client
