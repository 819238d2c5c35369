#!/usr/bin/env python3
"""
server.py - HTTP API for jqr

FastAPI-based server that queries and formats JSON documents with the same
semantics as the jqr command-line tool.
"""

import logging
from typing import Any, Literal, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from jqr import __version__
from jqr.errors import DocumentParseError, InvalidQueryError, SerializationError
from jqr.query import query_all, query_document
from jqr.rendering import JSONFormatter

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(title="jqr API", version=__version__)

formatter = JSONFormatter()


class QueryRequest(BaseModel):
    document: Any = None
    query: Optional[str] = None
    collapse: bool = True


class FormatRequest(BaseModel):
    content: str
    mode: Literal["pretty", "to-yaml", "to-json"] = "pretty"
    query: Optional[str] = None


@app.post("/query")
async def query(request: QueryRequest):
    """
    Run a JSONPath query against a document.

    Without a query the document is returned unchanged. With collapse
    enabled (the default) one match is returned bare, several as an array,
    and empty or invalid queries as sentinel strings. With collapse
    disabled the result is always an array.

    Returns:
        {"result": <value>}
    """
    if request.query is None:
        return {"result": request.document}

    if request.collapse:
        return {"result": query_document(request.document, request.query)}

    try:
        return {"result": query_all(request.document, request.query)}
    except InvalidQueryError:
        raise HTTPException(status_code=400, detail="Invalid JSONPath query")


@app.post("/format")
async def format_document(request: FormatRequest):
    """
    Pretty-print JSON text, or convert it between JSON and YAML.

    - mode="pretty": content is JSON, optionally filtered by a query
    - mode="to-yaml": content is JSON, converted to YAML
    - mode="to-json": content is YAML, converted to JSON

    Returns:
        {"output": <text>}
    """
    try:
        if request.mode == "to-yaml":
            output = formatter.convert_to_yaml(request.content)
        elif request.mode == "to-json":
            output = formatter.convert_to_json(request.content)
        else:
            output = formatter.pretty_print_json(request.content, request.query)
    except DocumentParseError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SerializationError as e:
        logger.error("Failed to render output: %s", e)
        raise HTTPException(status_code=500, detail=str(e))

    return {"output": output}


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
