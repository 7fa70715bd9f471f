# src/lambdas/site_publish/publish.py
import logging
import mimetypes
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from .errors import UploadError
from .models import ExtractedFile, UploadOutcome

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Types the Lambda base image's mime tables do not always know about
for _type, _ext in (
    ("font/woff2", ".woff2"),
    ("font/woff", ".woff"),
    ("application/manifest+json", ".webmanifest"),
    ("text/javascript", ".mjs"),
    ("image/svg+xml", ".svg"),
    ("image/webp", ".webp"),
    ("application/json", ".map"),
):
    mimetypes.add_type(_type, _ext)


def guess_content_type(key: str) -> str:
    content_type, _ = mimetypes.guess_type(key, strict=False)
    return content_type or DEFAULT_CONTENT_TYPE


def upload_file(client, bucket: str, extracted: ExtractedFile) -> UploadOutcome:
    content_type = guess_content_type(extracted.key)
    logger.info(" > Uploading: %s with mime %s", extracted.key, content_type)
    try:
        with extracted.open() as body:
            client.put_object(Bucket=bucket, Key=extracted.key, Body=body, ContentType=content_type)
    except (ClientError, BotoCoreError, OSError) as e:
        logger.error("Failed to upload %s to s3://%s: %s", extracted.key, bucket, e)
        return UploadOutcome(key=extracted.key, content_type=content_type, error=e)
    return UploadOutcome(key=extracted.key, content_type=content_type)


def publish_files(client, bucket: str, files: List[ExtractedFile],
                  max_workers: Optional[int] = None) -> List[UploadOutcome]:
    """
    Upload all staged files to the website bucket concurrently.

    With max_workers unset every upload is dispatched at once, one thread per
    file. Lambda caps a function at 1024 threads, so very large sites need
    MAX_UPLOAD_WORKERS; running out of threads surfaces as UploadError.
    The first failed upload raises UploadError straight away. Uploads not yet
    started are cancelled; uploads already in flight are left to finish.
    """
    if not files:
        logger.info("Nothing to upload to s3://%s", bucket)
        return []

    workers = min(max_workers, len(files)) if max_workers else len(files)
    logger.info("Uploading %d file(s) to S3 static website bucket %s (%d workers)", len(files), bucket, workers)

    outcomes: List[UploadOutcome] = []
    pool = ThreadPoolExecutor(max_workers=workers)
    try:
        futures = [pool.submit(upload_file, client, bucket, f) for f in files]
        for fut in as_completed(futures):
            outcome = fut.result()
            if not outcome.ok:
                raise UploadError(f"upload of '{outcome.key}' to bucket {bucket} failed", outcome.error) from outcome.error
            outcomes.append(outcome)
    except RuntimeError as e:
        # "can't start new thread"
        pool.shutdown(wait=False, cancel_futures=True)
        raise UploadError(f"could not dispatch uploads to bucket {bucket}", e) from e
    except UploadError:
        pool.shutdown(wait=False, cancel_futures=True)
        raise
    pool.shutdown(wait=True)

    logger.info("Uploaded %d file(s)", len(outcomes))
    return outcomes
