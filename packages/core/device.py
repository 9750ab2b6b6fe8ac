from __future__ import annotations

import hashlib
import platform
import uuid


def device_fingerprint() -> str:
    """Stable per-machine identifier sent as X-Device-Fingerprint."""
    raw = f"{platform.system()}|{platform.node()}|{uuid.getnode():012x}"
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:32]


__all__ = ["device_fingerprint"]
