import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import get_settings

# Routers
from routers.health import router as health_router
from routers.problems import router as problems_router

logger = logging.getLogger("math-tutor")
logging.basicConfig(level=logging.INFO)

app = FastAPI(title="Math Tutor – Problem & Grading API")

# Allow calls from the front-end dev server and configured sites
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def bad_request_body(request: Request, exc: RequestValidationError):
    logger.info("rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"message": "Request body must be a JSON object"})


@app.get("/")
def health_root():
    return {"ok": True}


app.include_router(problems_router)  # /api/math-problem, /api/math-problem/submit
app.include_router(health_router)  # /health/...
