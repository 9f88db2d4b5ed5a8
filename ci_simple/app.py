"""CI Simple API: FastAPI application.

Exposes the calculator and utility functions over HTTP:
- POST /api/calculator/*   arithmetic
- POST /api/utils/*        array / string / number helpers
- POST /api/sum            legacy addition
Invalid input -> 400 {"error": ...}, unknown route -> 404.
"""

import logging
import os
import time
from datetime import datetime, timezone

from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__, calculator, utils
from .calculator import InvalidInputError

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()

app = FastAPI(
    title="CI Simple API",
    description="Calculator and utility operations",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------

@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(RequestValidationError)
async def bad_body_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Request body must be a JSON object"})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse(
            status_code=404,
            content={"error": "Not Found", "message": f"Route {request.url.path} not found"},
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error", "message": str(exc)},
    )


# ---------------------------------------------------------------------------
# Health / info
# ---------------------------------------------------------------------------

@app.get("/health")
async def health():
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": time.monotonic() - STARTED_AT,
        "version": __version__,
    }


@app.get("/")
async def root():
    return {
        "message": "Welcome to the CI Simple API",
        "version": __version__,
        "endpoints": {
            "health": "/health",
            "calculator": "/api/calculator/*",
            "utils": "/api/utils/*",
            "legacy": "/api/sum",
        },
    }


# ---------------------------------------------------------------------------
# Calculator
# ---------------------------------------------------------------------------

@app.post("/api/calculator/add")
async def add(body: dict = Body(...)):
    a, b = body.get("a"), body.get("b")
    return {"result": calculator.add(a, b), "operation": "addition", "operands": [a, b]}


@app.post("/api/calculator/subtract")
async def subtract(body: dict = Body(...)):
    a, b = body.get("a"), body.get("b")
    return {"result": calculator.subtract(a, b), "operation": "subtraction", "operands": [a, b]}


@app.post("/api/calculator/multiply")
async def multiply(body: dict = Body(...)):
    a, b = body.get("a"), body.get("b")
    return {"result": calculator.multiply(a, b), "operation": "multiplication", "operands": [a, b]}


@app.post("/api/calculator/divide")
async def divide(body: dict = Body(...)):
    a, b = body.get("a"), body.get("b")
    return {"result": calculator.divide(a, b), "operation": "division", "operands": [a, b]}


@app.post("/api/calculator/power")
async def power(body: dict = Body(...)):
    base, exponent = body.get("base"), body.get("exponent")
    return {
        "result": calculator.power(base, exponent),
        "operation": "power",
        "base": base,
        "exponent": exponent,
    }


@app.post("/api/calculator/sqrt")
async def sqrt(body: dict = Body(...)):
    number = body.get("number")
    return {"result": calculator.sqrt(number), "operation": "square_root", "number": number}


@app.post("/api/calculator/factorial")
async def factorial(body: dict = Body(...)):
    n = body.get("n")
    return {"result": calculator.factorial(n), "operation": "factorial", "number": n}


# ---------------------------------------------------------------------------
# Utils
# ---------------------------------------------------------------------------

@app.post("/api/utils/array-sum")
async def array_sum(body: dict = Body(...)):
    array = body.get("array")
    return {"result": utils.array_sum(array), "operation": "array_sum", "array": array}


@app.post("/api/utils/array-average")
async def array_average(body: dict = Body(...)):
    array = body.get("array")
    return {"result": utils.array_average(array), "operation": "array_average", "array": array}


@app.post("/api/utils/capitalize")
async def capitalize(body: dict = Body(...)):
    text = body.get("text")
    return {"result": utils.capitalize(text), "operation": "capitalize", "original": text}


@app.post("/api/utils/reverse-string")
async def reverse_string(body: dict = Body(...)):
    text = body.get("text")
    return {"result": utils.reverse_string(text), "operation": "reverse_string", "original": text}


@app.post("/api/utils/is-palindrome")
async def is_palindrome(body: dict = Body(...)):
    text = body.get("text")
    return {"result": utils.is_palindrome(text), "operation": "is_palindrome", "text": text}


@app.post("/api/utils/is-prime")
async def is_prime(body: dict = Body(...)):
    number = body.get("number")
    return {"result": utils.is_prime(number), "operation": "is_prime", "number": number}


@app.post("/api/utils/fibonacci")
async def fibonacci(body: dict = Body(...)):
    n = body.get("n")
    return {"result": utils.fibonacci(n), "operation": "fibonacci", "position": n}


# ---------------------------------------------------------------------------
# Legacy
# ---------------------------------------------------------------------------

@app.post("/api/sum")
async def legacy_sum(body: dict = Body(...)):
    a, b = body.get("a"), body.get("b")
    if not (calculator.is_number(a) and calculator.is_number(b)):
        raise InvalidInputError("Both a and b must be numbers")
    return {"result": calculator.add(a, b), "operation": "legacy_sum", "operands": [a, b]}


if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get("PORT", 3000))
    logger.info(f"Server running on port {port}")
    uvicorn.run(app, host="0.0.0.0", port=port)
