from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from fastapi_utils.cbv import cbv

router = APIRouter(tags=["System"])


@cbv(router)
class SystemRoutes:
    @router.get("/healthz", response_class=PlainTextResponse)
    async def healthz(self):
        return "ok"
