"""
Health and build information endpoints.
"""
from __future__ import annotations

import os
import time
from datetime import datetime, timezone

from fastapi import APIRouter

from cashnib.utils.feature_flags import describe_feature_flags
from cashnib.utils.runtime import environment_name

router = APIRouter(tags=["support"])

_STARTED_AT = time.monotonic()


@router.get("/health")
def health_check():
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - _STARTED_AT, 3),
        "environment": environment_name(),
    }


@router.get("/build-info")
def get_build_info():
    """Return build and deployment information for the running service."""
    build_sha = os.getenv("BUILD_SHA")
    build_timestamp = os.getenv("BUILD_TIMESTAMP")
    image_tag = os.getenv("IMAGE_TAG")
    version = os.getenv("VERSION", "unknown")

    return {
        "build_sha": build_sha if build_sha else None,
        "build_timestamp": build_timestamp if build_timestamp else None,
        "image_tag": image_tag if image_tag else None,
        "service_name": "cashnib-service",
        "version": version,
        "features": describe_feature_flags(),
    }
