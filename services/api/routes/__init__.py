from fastapi import APIRouter
from .tools import router as tools_router

router = APIRouter(prefix="/v1")

@router.get("/", tags=["meta"])
def root() -> dict[str, str]:
    return {"service": "image-generation-server", "version": "v1"}

router.include_router(tools_router)
