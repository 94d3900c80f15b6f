"""Liveness probe for the load balancer in front of the interactions endpoint."""

from typing import Dict

from fastapi import APIRouter, Request

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/ping", summary="Basic liveness check")
async def ping(request: Request) -> Dict[str, str]:
    return {"status": "ok", "service": request.app.title, "version": request.app.version}
