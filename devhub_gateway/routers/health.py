from __future__ import annotations

import sys
import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from .. import version as svc_version
from ..config import Config
from .deps import get_config

router = APIRouter(tags=["health"])

_PROCESS_START = time.time()


@router.get("/api/ping", summary="Liveness probe")
def ping() -> Dict[str, str]:
    return {"message": "pong"}


@router.get("/version", summary="Service version", response_model=None)
def version(cfg: Config = Depends(get_config)) -> Dict[str, Any]:
    """
    Returns service version metadata and the chain target this instance serves.
    """
    return {
        "service": "devhub-gateway",
        "version": svc_version.__version__,
        "git": svc_version.git_describe(),
        "python": "{}.{}.{}".format(*sys.version_info[:3]),
        "started_at": datetime.fromtimestamp(_PROCESS_START, tz=timezone.utc).isoformat(),
        "uptime_seconds": round(max(0.0, time.time() - _PROCESS_START), 3),
        "contractId": cfg.contract_id,
        "rpcUrl": cfg.rpc_url,
    }
