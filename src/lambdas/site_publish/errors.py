# src/lambdas/site_publish/errors.py
from typing import Optional


class PublishError(Exception):
    """Base for every failure that ends a publish job."""
    stage = "publish"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause

    def __str__(self) -> str:
        msg = super().__str__()
        if self.cause is not None:
            return f"[{self.stage}] {msg}: {self.cause}"
        return f"[{self.stage}] {msg}"


class ConfigurationError(PublishError):
    stage = "configuration"


class SourceNotFoundError(PublishError):
    stage = "locate"


class DownloadError(PublishError):
    stage = "download"


class ExtractionError(PublishError):
    stage = "extract"


class UploadError(PublishError):
    stage = "upload"
