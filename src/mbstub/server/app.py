"""
mbstub Server

FastAPI application exposing stub generation and the template file store.

Endpoints:
- GET  /                              Form UI
- GET  /api/files                     List template files
- GET  /api/files/{filename}          Read a template file
- GET  /api/files/{filename}/download Download a template file
- POST /api/files                     Generate a stub and save/append it
- POST /api/preview                   Generate a stub without saving
- POST /api/parse-url                 Split a URL into path and query params
- GET  /api/stubs                     Saved records, newest first
"""

import logging
from pathlib import Path
from typing import Optional, List, Dict, Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, HTMLResponse, PlainTextResponse
from fastapi.templating import Jinja2Templates
import uvicorn

from .config import ServerConfig
from ..errors import InvalidURL, InvalidJSON, InvalidFilename, StubNotFound
from ..common.url_utils import parse_url
from ..storage.file_store import FileStore
from ..stub.generator import StubGenerator
from ..stub.models import StubDraft, StubFormData, ParseURLRequest, HTTP_METHODS
from ..stub.renderer import render_template, render_entry


TEMPLATES_DIR = Path(__file__).parent / "templates"


def format_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """
    Flatten pydantic error dicts into field-level messages.

    The leading "body" location segment FastAPI adds is dropped, so a bad
    status code is reported as field "statusCode".
    """
    formatted = []
    for error in errors:
        loc = [str(part) for part in error.get('loc', ())]
        if loc and loc[0] == 'body':
            loc = loc[1:]
        formatted.append({
            'field': '.'.join(loc),
            'message': error.get('msg', 'Invalid value')
        })
    return formatted


class StubServer:
    """
    Web server for building Mountebank stubs from form input.

    The file store is owned by the server instance and handed to every
    request handler, so tests (or a future database-backed store) can swap
    it out.

    Example:
        server = StubServer()
        server.start(port=3000)

        # Custom storage location, headers left out of predicates
        config = ServerConfig(stubs_dir='/tmp/stubs', match_headers=False)
        server = StubServer(config=config)
        server.start()
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        store: Optional[FileStore] = None,
        generator: Optional[StubGenerator] = None
    ):
        """
        Initialize stub server.

        Args:
            config: Optional ServerConfig for server behavior
            store: Optional FileStore instance (will create if None)
            generator: Optional StubGenerator instance (will create if None)
        """
        self.config = config or ServerConfig()

        self.logger = logging.getLogger("mbstub.server")
        self.logger.setLevel(getattr(logging, self.config.log_level.upper()))

        self.store = store or FileStore(
            self.config.stubs_dir,
            extension=self.config.file_extension,
            lock_writes=self.config.lock_writes
        )
        self.generator = generator or StubGenerator(
            match_headers=self.config.match_headers,
            include_response_headers=self.config.include_response_headers
        )
        self.templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

        self.app = self._create_app()

    def _create_app(self) -> FastAPI:
        """Create FastAPI application with routes."""
        app = FastAPI(
            title="mbstub",
            description="Build Mountebank stub templates from request/response forms",
            version="1.0.0"
        )

        @app.exception_handler(RequestValidationError)
        async def validation_error_handler(request: Request, exc: RequestValidationError):
            return JSONResponse(
                status_code=400,
                content={
                    'message': 'Validation error',
                    'errors': format_validation_errors(exc.errors())
                }
            )

        if self.config.ui_enabled:
            @app.get("/", response_class=HTMLResponse, include_in_schema=False)
            async def index(request: Request):
                """Serve the stub form."""
                return self.templates.TemplateResponse(
                    request,
                    "index.html",
                    {
                        'methods': HTTP_METHODS,
                        'extension': self.config.file_extension
                    }
                )

        @app.get("/api/files")
        async def list_files():
            """List all template files."""
            try:
                files = self.store.list_files()
            except OSError:
                self.logger.exception("Error listing files")
                return JSONResponse(status_code=500, content={'message': 'Failed to retrieve files'})
            return JSONResponse(content={'files': files})

        @app.get("/api/files/{filename}")
        async def get_file(filename: str):
            """Get a template file's content."""
            try:
                content = self.store.read(filename)
            except (StubNotFound, InvalidFilename):
                self.logger.warning(f"File not found: {filename}")
                return JSONResponse(status_code=404, content={'message': f"File not found: {filename}"})
            except OSError:
                self.logger.exception(f"Error reading {filename}")
                return JSONResponse(status_code=500, content={'message': 'Failed to read file'})

            return JSONResponse(content={
                'filename': filename,
                'content': content,
                'filePath': str(self.store.path_for(filename).resolve())
            })

        @app.get("/api/files/{filename}/download")
        async def download_file(filename: str):
            """Download a template file as an attachment."""
            try:
                content = self.store.read(filename)
            except (StubNotFound, InvalidFilename):
                self.logger.warning(f"File not found: {filename}")
                return JSONResponse(status_code=404, content={'message': f"File not found: {filename}"})
            except OSError:
                self.logger.exception(f"Error reading {filename}")
                return JSONResponse(status_code=500, content={'message': 'Failed to read file'})

            return PlainTextResponse(
                content=content,
                headers={'Content-Disposition': f'attachment; filename="{filename}"'}
            )

        @app.post("/api/files", status_code=201)
        async def save_file(data: StubFormData):
            """Generate a stub from the form and save or append it."""
            try:
                filename = self.store.ensure_extension(data.filename)
                self.store.path_for(filename)  # rejects unsafe names before any write
                stub = self.generator.generate(data)
            except (InvalidJSON, InvalidFilename) as e:
                self.logger.warning(f"Rejected stub for {data.filename}: {e}")
                return JSONResponse(status_code=400, content={'message': str(e)})

            template = render_template(stub)

            try:
                if data.mode == 'append':
                    saved = self.store.append(filename, template)
                else:
                    saved = self.store.save(filename, template)
            except OSError:
                self.logger.exception(f"Error saving {filename}")
                return JSONResponse(status_code=500, content={'message': 'Failed to save file'})

            return JSONResponse(status_code=201, content={
                'message': 'File saved successfully',
                'filename': saved,
                'filePath': str(self.store.path_for(saved).resolve()),
                'content': template
            })

        @app.post("/api/preview")
        async def preview(draft: StubDraft):
            """Generate a stub and its template text without saving."""
            try:
                stub = self.generator.generate(draft)
            except InvalidJSON as e:
                return JSONResponse(status_code=400, content={'message': str(e)})

            return JSONResponse(content={
                'stub': stub,
                'template': render_template(stub),
                'entry': render_entry(stub)
            })

        @app.post("/api/parse-url")
        async def parse_url_endpoint(body: ParseURLRequest):
            """Split a URL into path and query parameters."""
            try:
                parsed = parse_url(body.url)
            except InvalidURL as e:
                return JSONResponse(status_code=400, content={'message': str(e)})
            return JSONResponse(content=parsed.to_dict())

        @app.get("/api/stubs")
        async def list_stubs():
            """Get saved records for the recent files list."""
            return JSONResponse(content={
                'stubs': [record.to_dict() for record in self.store.list_records()]
            })

        return app

    def start(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        access_log: bool = True
    ):
        """
        Start the server.

        Args:
            host: Host to bind to (overrides config)
            port: Port to bind to (overrides config)
            access_log: Enable access logging
        """
        actual_host = host or self.config.host
        actual_port = port or self.config.port

        print("🚀 mbstub server starting...")
        print(f"   Host: {actual_host}:{actual_port}")
        print(f"   Stubs directory: {self.store.directory.resolve()}")
        if self.config.ui_enabled:
            print(f"   Form UI: http://{actual_host}:{actual_port}/")
        print()

        uvicorn.run(
            self.app,
            host=actual_host,
            port=actual_port,
            log_level=self.config.log_level,
            access_log=access_log
        )

    def get_app(self) -> FastAPI:
        """
        Get the FastAPI app instance for testing or custom deployment.

        Returns:
            FastAPI application instance
        """
        return self.app


def create_stub_server(
    stubs_dir: str = "stubs",
    host: str = "127.0.0.1",
    port: int = 3000,
    log_level: str = "info",
    match_headers: bool = True,
    include_response_headers: bool = True,
    lock_writes: bool = True,
    ui_enabled: bool = True
) -> StubServer:
    """
    Convenience function to create and configure a stub server.

    Args:
        stubs_dir: Directory for template files
        host: Host to bind to
        port: Port to bind to
        log_level: Log level (debug, info, warning, error)
        match_headers: Put form headers in the predicate
        include_response_headers: Put Content-Type and form headers in the response
        lock_writes: Serialize writes per filename
        ui_enabled: Serve the form UI at /

    Returns:
        Configured StubServer instance

    Example:
        server = create_stub_server('stubs', port=3000)
        server.start()
    """
    config = ServerConfig(
        stubs_dir=stubs_dir,
        host=host,
        port=port,
        log_level=log_level,
        match_headers=match_headers,
        include_response_headers=include_response_headers,
        lock_writes=lock_writes,
        ui_enabled=ui_enabled
    )

    return StubServer(config=config)
