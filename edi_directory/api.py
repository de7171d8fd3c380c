"""
Read-only HTTP lookup service over EDI directories.

Directory parameters are passed as query parameters, e.g.
GET /api/directories/E/entries/NAD?d0052=D&d0054=96A
"""
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel

from .config import Settings
from .errors import (
    ConfigurationError,
    DirectoryError,
    DirectoryFileNotFoundError,
    LookupNotFoundError,
)
from .identifiers import classify
from .logger import get_logger
from .records import DataElementProperties
from .registry import DirectoryRegistry

TABLES = ("data_elements", "composites", "segments", "messages")

# Query parameters holding integers
_INT_PARAMS = {"d0002"}
_BOOL_PARAMS = {"is_iedi"}


class EntryModel(BaseModel):
    item_no: Optional[str] = None
    name: Optional[str] = None
    status: Optional[str] = None
    max_repeat: int


class DataElementModel(BaseModel):
    name: Optional[str] = None
    format: Optional[str] = None
    status: Optional[str] = None
    description: Optional[str] = None


class EntriesResponse(BaseModel):
    identifier: str
    kind: str
    code: str
    entries: List[EntryModel] = []
    data_element: Optional[DataElementModel] = None


class NamesResponse(BaseModel):
    table: str
    names: List[str]


def _directory_params(request: Request) -> Dict[str, Any]:
    params: Dict[str, Any] = {}
    for key, value in request.query_params.items():
        if key in _INT_PARAMS and value.isdigit():
            params[key] = int(value)
        elif key in _BOOL_PARAMS:
            params[key] = value.lower() in ("1", "true", "yes")
        else:
            params[key] = value
    return params


def _http_error(e: DirectoryError) -> HTTPException:
    if isinstance(e, (LookupNotFoundError, DirectoryFileNotFoundError)):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ConfigurationError):
        return HTTPException(status_code=500, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


def create_app(registry: Optional[DirectoryRegistry] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the lookup API bound to a registry (a fresh one from settings by default)."""
    if registry is None:
        registry = DirectoryRegistry(settings=settings)
    logger = get_logger()
    app = FastAPI(title="EDI Directory Lookup API")
    app.state.registry = registry

    @app.get("/api/directories/{standard}/names/{table}", response_model=NamesResponse)
    def list_names(standard: str, table: str, request: Request):
        if table not in TABLES:
            raise HTTPException(status_code=404, detail=f"Unknown table: {table}")
        try:
            directory = registry.create(standard, _directory_params(request))
        except DirectoryError as e:
            logger.error(f"Directory request failed: {e}")
            raise _http_error(e)
        return NamesResponse(table=table, names=sorted(getattr(directory, table)))

    @app.get("/api/directories/{standard}/entries/{identifier}", response_model=EntriesResponse)
    def get_entries(standard: str, identifier: str, request: Request):
        try:
            ref = classify(identifier)
            directory = registry.create(standard, _directory_params(request))
            found = directory.lookup(identifier)
        except DirectoryError as e:
            logger.error(f"Lookup of {identifier} failed: {e}")
            raise _http_error(e)

        if isinstance(found, DataElementProperties):
            return EntriesResponse(identifier=identifier, kind=ref.kind.value, code=ref.code,
                                   data_element=DataElementModel(**asdict(found)))
        return EntriesResponse(identifier=identifier, kind=ref.kind.value, code=ref.code,
                               entries=[EntryModel(**asdict(entry)) for entry in found])

    return app
