# src/lambdas/site_publish/aws.py
import boto3
from botocore.config import Config
from typing import Dict

from .config import env, region
from .errors import ConfigurationError

CREDENTIAL_FIELDS = ("accessKeyId", "secretAccessKey", "sessionToken")


def _s3_kwargs(region_name: str) -> Dict[str, str]:
    kwargs = {"region_name": region_name}
    # LocalStack / custom endpoints for local runs
    ep = env("AWS_ENDPOINT_URL_S3")
    if ep:
        kwargs["endpoint_url"] = ep
    return kwargs


def source_s3_client(credentials: Dict[str, str]):
    """S3 client scoped to the short-lived credentials CodePipeline hands the job."""
    missing = [f for f in CREDENTIAL_FIELDS if not credentials.get(f)]
    if missing:
        raise ConfigurationError(f"artifactCredentials missing {', '.join(missing)}")
    return boto3.client(
        "s3",
        aws_access_key_id=credentials["accessKeyId"],
        aws_secret_access_key=credentials["secretAccessKey"],
        aws_session_token=credentials["sessionToken"],
        config=Config(signature_version="s3v4"),
        **_s3_kwargs(region()),
    )


def destination_s3_client(region_name: str):
    return boto3.client("s3", **_s3_kwargs(region_name))


def codepipeline_client():
    return boto3.client("codepipeline", region_name=region())
