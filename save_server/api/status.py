# save_server/api/status.py

from fastapi import APIRouter, Request


router = APIRouter()


@router.get("/")
def service_status(request: Request):
    settings = request.app.state.settings
    return {"ok": True, "service": settings.service_name, "version": settings.version}
