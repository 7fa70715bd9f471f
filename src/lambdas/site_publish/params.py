# src/lambdas/site_publish/params.py
import json
import logging
from typing import Any, Dict, List

from .errors import ConfigurationError, SourceNotFoundError
from .models import ArtifactLocation, PipelineParameters

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = {
    "artifact": "artifact_name",
    "s3StaticSiteBucket": "destination_bucket",
    "s3StaticSiteBucketRegion": "destination_region",
}


def resolve_parameters(raw: str) -> PipelineParameters:
    """
    Parse the action's UserParameters, e.g.
    {"artifact": "SourceOutput", "s3StaticSiteBucket": "www.example.com",
     "s3StaticSiteBucketRegion": "us-east-1", "sourceDirectory": "public"}
    sourceDirectory is optional; absent, null or "" publishes the whole archive.
    """
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise ConfigurationError("UserParameters is not valid JSON", e) from e
    if not isinstance(payload, dict):
        raise ConfigurationError(f"UserParameters must be a JSON object, got {type(payload).__name__}")

    values: Dict[str, str] = {}
    for field_name, attr in REQUIRED_FIELDS.items():
        value = payload.get(field_name)
        if not isinstance(value, str) or not value:
            raise ConfigurationError(f"UserParameters field '{field_name}' must be a non-empty string")
        values[attr] = value

    prefix = payload.get("sourceDirectory")
    if prefix is None:
        prefix = ""
    if not isinstance(prefix, str):
        raise ConfigurationError("UserParameters field 'sourceDirectory' must be a string")

    return PipelineParameters(source_subtree_prefix=prefix.rstrip("/"), **values)


def locate_artifact(input_artifacts: List[Dict[str, Any]], artifact_name: str) -> ArtifactLocation:
    for artifact in input_artifacts:
        if artifact.get("name") != artifact_name:
            continue
        s3_location = (artifact.get("location") or {}).get("s3Location") or {}
        bucket, key = s3_location.get("bucketName"), s3_location.get("objectKey")
        if not bucket or not key:
            raise SourceNotFoundError(f"input artifact '{artifact_name}' has no S3 location")
        location = ArtifactLocation(bucket=bucket, key=key)
        logger.info("Resolved artifact %s to %s", artifact_name, location)
        return location

    names = [a.get("name") for a in input_artifacts]
    raise SourceNotFoundError(f"input artifact '{artifact_name}' not found among {names}")
