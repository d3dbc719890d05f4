"""Local filesystem blob store for uploaded resumes."""

import logging
import re
import time
from pathlib import Path

logger = logging.getLogger("resume_store")

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class LocalResumeStore:
    def __init__(self, upload_dir: str, public_prefix: str = "/resumes"):
        self.upload_dir = Path(upload_dir)
        self.public_prefix = "/" + public_prefix.strip("/")
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def store(self, owner_id: str, filename: str, content: bytes) -> str:
        """Write ``content`` and return the public path it is served under."""
        safe_name = _UNSAFE_CHARS.sub("_", Path(filename or "resume.pdf").name) or "resume.pdf"
        stored_name = f"{owner_id}_{int(time.time() * 1000)}_{safe_name}"
        (self.upload_dir / stored_name).write_bytes(content)
        logger.info("Stored resume for %s as %s (%d bytes)", owner_id, stored_name, len(content))
        return f"{self.public_prefix}/{stored_name}"

    def delete(self, public_path: str) -> None:
        """Remove a previously stored file; unknown paths are ignored."""
        stored_name = Path(public_path).name
        (self.upload_dir / stored_name).unlink(missing_ok=True)
        logger.info("Deleted stored resume %s", stored_name)
