# src/lambdas/site_publish/models.py
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional

from .errors import ConfigurationError


@dataclass(frozen=True)
class JobContext:
    job_id: str
    user_parameters: str
    input_artifacts: List[Dict[str, Any]] = field(default_factory=list)
    credentials: Dict[str, str] = field(default_factory=dict)
    invocation_id: str = ""

    @staticmethod
    def job_id_from_event(event: Dict[str, Any]) -> Optional[str]:
        if not isinstance(event, dict):
            return None
        job = event.get("CodePipeline.job") or {}
        return job.get("id") if isinstance(job, dict) else None

    @classmethod
    def from_event(cls, event: Dict[str, Any], context=None) -> "JobContext":
        """
        Build the job record from a CodePipeline invoke event:
        {"CodePipeline.job": {"id": "...", "data": {
            "actionConfiguration": {"configuration": {"UserParameters": "{...}"}},
            "inputArtifacts": [{"name": "...", "location": {"s3Location": {...}}}],
            "artifactCredentials": {"accessKeyId": ..., "secretAccessKey": ..., "sessionToken": ...}}}}
        """
        job_id = cls.job_id_from_event(event)
        if not job_id:
            raise ConfigurationError("event carries no CodePipeline job id")
        data = event["CodePipeline.job"].get("data") or {}
        try:
            user_parameters = data["actionConfiguration"]["configuration"]["UserParameters"]
        except (KeyError, TypeError) as e:
            raise ConfigurationError("UserParameters missing from action configuration", e) from e

        return cls(
            job_id=job_id,
            user_parameters=user_parameters,
            input_artifacts=list(data.get("inputArtifacts") or []),
            credentials=dict(data.get("artifactCredentials") or {}),
            invocation_id=getattr(context, "aws_request_id", "") or "",
        )


@dataclass(frozen=True)
class PipelineParameters:
    artifact_name: str
    destination_bucket: str
    destination_region: str
    source_subtree_prefix: str = ""


@dataclass(frozen=True)
class ArtifactLocation:
    bucket: str
    key: str

    def __str__(self) -> str:
        return f"s3://{self.bucket}/{self.key}"


@dataclass(frozen=True)
class ExtractedFile:
    key: str
    path: Path

    def open(self) -> BinaryIO:
        return open(self.path, "rb")


@dataclass
class UploadOutcome:
    key: str
    content_type: str
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None
