import os
from typing import Iterable, Optional

from starlette.exceptions import HTTPException
from starlette.responses import Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

INDEX_FILE = "index.html"


class SPAStaticFiles(StaticFiles):
    """Static files with single-page-app fallback and Cache-Control headers."""

    def __init__(
            self,
            directory: str,
            spa_mode: bool = True,
            cache_max_age: int = 604800,
            no_cache_paths: Optional[Iterable[str]] = None
    ):
        super().__init__(directory=directory, html=True)
        self.spa_mode = spa_mode
        self.cache_max_age = cache_max_age
        self.no_cache_paths = {"/" + p.lstrip("/") for p in (no_cache_paths or [])}

    async def get_response(self, path: str, scope: Scope) -> Response:
        fallback = False
        try:
            response = await super().get_response(path, scope)
        except HTTPException as exc:
            if exc.status_code != 404 or not self.spa_mode:
                raise
            response = await super().get_response(INDEX_FILE, scope)
            fallback = True

        self.set_cache_control(response, path, fallback)
        return response

    def set_cache_control(self, response: Response, path: str, fallback: bool = False) -> None:
        if self.cache_max_age < 0:
            return

        served = os.path.basename(getattr(response, "path", "") or "")
        request_path = "/" + ("" if path == "." else path.replace(os.sep, "/"))
        if fallback or served == INDEX_FILE or request_path in self.no_cache_paths:
            response.headers["Cache-Control"] = "no-cache"
        else:
            response.headers["Cache-Control"] = f"max-age={self.cache_max_age}"
