"""FastAPI app entrypoint."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from settleup.config import ALLOWED_ORIGINS, LOG_LEVEL
from settleup.errors import SplitEngineError
from settleup.routers import splits, settlements
from settleup.schemas import ErrorResponse

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="SettleUp Engine API",
    description="Split an expense between participants and work out who pays whom to settle a group.",
    version="1.0.0",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(splits.router, prefix="/api")
app.include_router(settlements.router, prefix="/api")


@app.exception_handler(SplitEngineError)
async def split_engine_error_handler(request: Request, exc: SplitEngineError):
    logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    discrepancy = getattr(exc, "discrepancy", None)
    body = ErrorResponse(
        detail=exc.message,
        code=exc.code,
        discrepancy=float(discrepancy) if discrepancy is not None else None,
    )
    return JSONResponse(status_code=400, content=body.model_dump())


@app.get("/")
def root():
    return {"message": "SettleUp Engine API", "docs": "/docs"}
