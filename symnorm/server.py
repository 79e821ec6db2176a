"""
HTTP endpoint for SYMNORM.

    GET /simplify/{expression}

Returns the simplified LaTeX form and the numeric result:

    GET /simplify/2*(3%2B4)
    {"simplified": "2 \\cdot 3 + 2 \\cdot 4", "result": "14.0"}

Failed evaluation is reported in "result" ("Error: Division by zero").
Input that cannot be processed at all returns an {"error": ...} payload.

Run with:
    symnorm-server --port 3000
"""

import argparse
from typing import Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from . import __version__
from .errors import ConvergenceError, EvalError, SymnormError
from .evaluator import evaluate
from .expression import parse_expressions
from .latex import to_latex
from .simplifier import Simplifier, DEFAULT_MAX_SWEEPS, DEFAULT_MAX_NODES
from .tokenizer import tokenize

MULTIPLE_EXPRESSIONS = "Multiple expressions are not supported."


class SimplifyResponse(BaseModel):
    """Response model for the simplify endpoint."""
    simplified: str
    result: str


class ErrorResponse(BaseModel):
    """Payload returned when input cannot be processed."""
    error: str


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(simplifier: Optional[Simplifier] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        simplifier: Simplifier used for every request (default: Simplifier())
    """
    simplifier = simplifier or Simplifier()

    app = FastAPI(
        title="SYMNORM",
        description="Simplify arithmetic and trigonometric expressions",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> Dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "version": __version__}

    @app.get(
        "/simplify/{expression:path}",
        response_model=SimplifyResponse,
        responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    )
    def simplify(expression: str):
        """Simplify one expression and evaluate the result."""
        try:
            expressions = parse_expressions(tokenize(expression))
        except SymnormError as e:
            return _error(400, str(e))

        if len(expressions) != 1:
            return _error(400, MULTIPLE_EXPRESSIONS)

        try:
            simplified = simplifier.simplify(expressions[0])
        except ConvergenceError as e:
            return _error(422, str(e))

        try:
            result = repr(evaluate(simplified))
        except EvalError as e:
            result = f"Error: {e}"

        return SimplifyResponse(simplified=to_latex(simplified), result=result)

    return app


app = create_app()


def main():
    """Main entry point."""
    import uvicorn

    parser = argparse.ArgumentParser(
        prog="symnorm-server",
        description="Serve the SYMNORM simplify endpoint over HTTP",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=3000, help="Port (default: 3000)")
    parser.add_argument("--max-sweeps", type=int, default=DEFAULT_MAX_SWEEPS,
                        help=f"Maximum simplification sweeps (default: {DEFAULT_MAX_SWEEPS})")
    parser.add_argument("--max-nodes", type=int, default=DEFAULT_MAX_NODES,
                        help=f"Maximum expression size (default: {DEFAULT_MAX_NODES})")
    args = parser.parse_args()

    server_app = create_app(Simplifier(max_sweeps=args.max_sweeps, max_nodes=args.max_nodes))
    print(f"Starting server on http://{args.host}:{args.port}")
    uvicorn.run(server_app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
