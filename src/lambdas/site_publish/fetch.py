# src/lambdas/site_publish/fetch.py
import logging
import shutil
from pathlib import Path

from botocore.exceptions import BotoCoreError, ClientError

from .errors import DownloadError
from .models import ArtifactLocation

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def download_artifact(client, location: ArtifactLocation, dest_path: Path) -> Path:
    """
    Stream the artifact object straight into dest_path, replacing whatever is there.
    The body is copied chunk by chunk so archive size is not bounded by memory.
    """
    dest_path = Path(dest_path)
    logger.info("Downloading CodePipeline artifact %s to %s", location, dest_path)
    try:
        resp = client.get_object(Bucket=location.bucket, Key=location.key)
        body = resp["Body"]
        try:
            with open(dest_path, "wb") as fh:
                shutil.copyfileobj(body, fh, CHUNK_SIZE)
        finally:
            body.close()
    except ClientError as e:
        code = e.response.get("Error", {}).get("Code", "Unknown")
        logger.error("AWS ClientError (%s) downloading %s", code, location)
        raise DownloadError(f"failed to read {location}", e) from e
    except (BotoCoreError, OSError) as e:
        logger.error("Error streaming %s to %s: %s", location, dest_path, e)
        raise DownloadError(f"failed to stream {location} to {dest_path}", e) from e

    logger.info("Downloaded %d bytes", dest_path.stat().st_size)
    return dest_path
