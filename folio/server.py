"""Development server for Folio.

Pages are composed on every request from freshly read content, so an edit
shows up on the next reload without any rebuild step. Static assets are
the exception: they are processed once into the output directory and
processed again when the project's ``assets`` change.

Requests under the CMS prefix never reach the composer. They are
redirected to ``cms_url`` when the project configures one and answered
with the 404 page otherwise.

Key classes:
- DevServer: Owns the configuration and composes pages for requests.
- LiveReload: Websocket endpoint that tells open pages to reload.
- _PageHandler: HTTP handler serving assets and composed pages.
- _SourceEventHandler: Watchdog handler forwarding source changes.
"""

from __future__ import annotations

import asyncio
import functools
import json
import shutil
import threading
import time
from collections.abc import Iterable
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from urllib.parse import parse_qs, urlsplit

import websockets
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .assets import AssetPipeline
from .build import CONFIG_FILE, load_config
from .components import CookiePreferenceStore, Theme, ThemeToggle
from .composer import PageComposer
from .content import FileContentLoader, NotFoundError
from .site import SITE_CONFIG
from .templates import TemplateEngine

RELOAD_SCRIPT_TEMPLATE = """
<script>
(() => {{
  const ws = new WebSocket('ws://' + location.hostname + ':{ws_port}');
  ws.onmessage = (event) => {{
    const data = JSON.parse(event.data || '{{}}');
    if (data.type === 'reload') location.reload();
  }};
}})();
</script>
"""

# Directory names whose events never trigger a reload.
IGNORED_PARTS = {".git", "node_modules", "__pycache__"}


def inject_reload_script(html: str, script: str) -> str:
    head, sep, tail = html.rpartition("</body>")
    if not sep:
        return html + script
    return f"{head}{script}{sep}{tail}"


def source_signature(roots: Iterable[Path], base: Path) -> tuple | None:
    """Fingerprint every file below ``roots``.

    Args:
        roots: Files or directories to include; missing ones are skipped.
        base: Directory entries are reported relative to.

    Returns:
        Sorted ``(relative path, mtime_ns, size)`` tuples, or None when no
        file exists.
    """
    entries = []
    for root in roots:
        if root.is_file():
            candidates = [root]
        elif root.is_dir():
            candidates = [p for p in root.rglob("*") if not p.is_dir()]
        else:
            continue
        for path in candidates:
            try:
                stat = path.stat()
            except OSError:
                continue
            entries.append((str(path.relative_to(base)), stat.st_mtime_ns, stat.st_size))
    return tuple(sorted(entries)) or None


def resolve_ports(
    config: dict, http_port: int | None, ws_port: int | None
) -> tuple[int, int]:
    """Work out the HTTP and websocket ports.

    An explicit ``http_port`` moves the websocket to the next port unless
    ``ws_port`` is given too; otherwise ``folio.yaml`` decides.
    """
    http = int(http_port or config.get("port", 4000))
    if ws_port is not None:
        return http, int(ws_port)
    if http_port is not None:
        return http, http + 1
    return http, int(config.get("ws_port") or http + 1)


class LiveReload:
    """Websocket endpoint broadcasting reload messages.

    The client set belongs to the hub's own event loop; other threads only
    reach it through ``notify``.

    Attributes:
        port: Websocket port.
        clients: Connected websockets.
    """

    def __init__(self, port: int):
        self.port = port
        self.clients: set = set()
        self.loop = asyncio.new_event_loop()

    @property
    def script(self) -> str:
        return RELOAD_SCRIPT_TEMPLATE.format(ws_port=self.port)

    def run(self) -> None:  # pragma: no cover - integration path
        asyncio.set_event_loop(self.loop)
        try:
            self.loop.run_until_complete(self._serve())
        except OSError as exc:
            print(f"Live reload unavailable (port {self.port}): {exc}")

    async def _serve(self) -> None:  # pragma: no cover - integration path
        async with websockets.serve(self.register, "0.0.0.0", self.port):
            await asyncio.Future()

    async def register(self, websocket) -> None:
        self.clients.add(websocket)
        try:
            await websocket.wait_closed()
        finally:
            self.clients.discard(websocket)

    def notify(self) -> None:
        """Schedule a reload broadcast from any thread."""
        message = json.dumps({"type": "reload"})
        future = asyncio.run_coroutine_threadsafe(self.broadcast(message), self.loop)
        future.add_done_callback(self._report_failure)

    @staticmethod
    def _report_failure(future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            print(f"Live reload broadcast failed: {type(exc).__name__}: {exc}")

    async def broadcast(self, message: str) -> None:
        clients = list(self.clients)
        results = await asyncio.gather(
            *(ws.send(message) for ws in clients), return_exceptions=True
        )
        for ws, result in zip(clients, results):
            if isinstance(result, websockets.ConnectionClosed):
                self.clients.discard(ws)
            elif isinstance(result, Exception):
                raise result

    def close(self) -> None:
        self.loop.call_soon_threadsafe(self.loop.stop)


class _PageHandler(SimpleHTTPRequestHandler):
    """Serves processed assets from disk and composes everything else.

    Attributes:
        dev_server: Server supplying composition and the reload script.
    """

    dev_server: DevServer

    def __init__(self, *args, dev_server: DevServer, **kwargs):
        # the base initializer handles the request, so this must come first
        self.dev_server = dev_server
        super().__init__(*args, **kwargs)

    def end_headers(self):
        self.send_header("Cache-Control", "no-store")
        super().end_headers()

    def send_head(self):
        parts = urlsplit(self.path)
        path = parts.path
        if SITE_CONFIG.is_cms_path(path):
            return self._send_cms(path)
        if path.startswith("/assets/") and Path(self.translate_path(self.path)).is_file():
            return super().send_head()
        requested = parse_qs(parts.query).get("theme")
        preferences = self.dev_server.preferences(
            self.headers.get("Cookie"), requested[-1] if requested else None
        )
        status, html = self.dev_server.render(path, preferences)
        return self._send_html(status, html, preferences.set_cookie_header())

    def _send_cms(self, path: str):
        cms_url = self.dev_server.cms_url
        if not cms_url:
            status, html = self.dev_server.render_error(404)
            return self._send_html(status, html)
        self.send_response(302)
        self.send_header("Location", cms_url.rstrip("/") + path)
        self.send_header("Content-Length", "0")
        self.end_headers()
        return None

    def _send_html(self, status: int, html: str, set_cookie: str | None = None):
        payload = inject_reload_script(html, self.dev_server.live_reload.script).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(payload)))
        if set_cookie:
            self.send_header("Set-Cookie", set_cookie)
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(payload)
        return None


class DevServer:
    """Development server composing pages per request.

    Attributes:
        project_root: Root directory of the project.
        config: Effective ``folio.yaml`` configuration.
        content_dir: Content store directory.
        output_dir: Directory processed assets are served from.
        http_port: Port for the HTTP server.
        cms_url: Where requests under the CMS prefix are redirected.
        include_drafts: Whether draft documents are routable.
        live_reload: Websocket hub notified after every change.
    """

    debounce_seconds = 0.05

    def __init__(
        self,
        project_root: Path,
        http_port: int | None = None,
        ws_port: int | None = None,
        include_drafts: bool = False,
    ):
        self.project_root = project_root
        self.config = load_config(project_root)
        self.content_dir = project_root / self.config["content_dir"]
        self.output_dir = project_root / self.config["output_dir"]
        self.http_port, resolved_ws = resolve_ports(self.config, http_port, ws_port)
        self.cms_url = str(self.config.get("cms_url") or "")
        self.include_drafts = include_drafts
        self.live_reload = LiveReload(resolved_ws)
        self._observer: Observer | None = None
        self._change_lock = threading.Lock()
        self._last_change_at = 0.0
        self._signature: tuple | None = None

    @property
    def ws_port(self) -> int:
        return self.live_reload.port

    @property
    def staging_dir(self) -> Path:
        return self.output_dir.with_name(self.output_dir.name + ".staging")

    @property
    def assets_dir(self) -> Path:
        return self.project_root / "assets"

    @property
    def watched_paths(self) -> list[Path]:
        return [
            self.content_dir,
            self.assets_dir,
            self.project_root / "templates",
            self.project_root / CONFIG_FILE,
        ]

    def start(self) -> None:  # pragma: no cover - integration path
        self.build_assets()
        self._signature = self.signature()
        threading.Thread(target=self._serve_http, daemon=True).start()
        threading.Thread(target=self.live_reload.run, daemon=True).start()
        self.watch()
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            self.stop()

    def stop(self) -> None:
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None
        self.live_reload.close()

    def preferences(
        self, cookie_header: str | None = None, requested_theme: str | None = None
    ) -> CookiePreferenceStore:
        """Read the request's theme cookie and apply a ``?theme=`` switch.

        The server-rendered toggle submits the next theme as a query
        parameter. A known value is stored through a mounted ThemeToggle,
        so the response can carry the matching ``Set-Cookie`` header.
        Unknown values are ignored.
        """
        store = CookiePreferenceStore(cookie_header)
        if requested_theme:
            toggle = ThemeToggle(Theme(SITE_CONFIG.default_theme))
            toggle.mount(store)
            try:
                toggle.set_theme(requested_theme)
            except ValueError:
                print(f"Ignoring unknown theme {requested_theme!r}")
        return store

    def composer(self, preferences: CookiePreferenceStore | None = None) -> PageComposer:
        """Create a composer for one request.

        The theme toggle is only resolved server-side when the browser
        sent a theme cookie or asked for a theme.
        """
        return PageComposer(
            FileContentLoader(self.content_dir),
            TemplateEngine(template_dirs=[self.project_root / "templates"]),
            include_drafts=self.include_drafts,
            preference_store=preferences if preferences and preferences.get() else None,
        )

    def render(
        self, path: str, preferences: CookiePreferenceStore | None = None
    ) -> tuple[int, str]:
        """Compose the page for a request path.

        Returns:
            Tuple of (HTTP status, HTML). Missing documents give the 404
            page; any other failure is logged and gives a generic 500 page.
        """
        try:
            return 200, self.composer(preferences).render_path(path)
        except NotFoundError:
            return self.render_error(404)
        except Exception as exc:
            print(f"Error rendering {path}: {type(exc).__name__}: {exc}")
            return self.render_error(500)

    def render_error(self, status: int) -> tuple[int, str]:
        composer = self.composer()
        if status == 404:
            return status, composer.compose_not_found()
        return status, composer.compose_error(status, "Something went wrong.")

    def _serve_http(self) -> None:  # pragma: no cover - integration path
        handler = functools.partial(
            _PageHandler, dev_server=self, directory=str(self.output_dir)
        )
        httpd = ThreadingHTTPServer(("", self.http_port), handler)
        print(f"Serving {self.content_dir} at http://localhost:{self.http_port}")
        httpd.serve_forever()

    def watch(self) -> None:
        observer = Observer()
        handler = _SourceEventHandler(self)
        for path in self.watched_paths:
            if path.is_dir():
                observer.schedule(handler, str(path), recursive=True)
        # picks up folio.yaml
        observer.schedule(handler, str(self.project_root), recursive=False)
        observer.start()
        self._observer = observer

    def signature(self) -> tuple | None:
        return source_signature(self.watched_paths, self.project_root)

    def on_change(self, path: Path) -> bool:
        """React to a changed source file.

        Args:
            path: File reported by the watcher.

        Returns:
            True if browsers were told to reload.
        """
        if time.time() - self._last_change_at < self.debounce_seconds:
            return False
        if not self._change_lock.acquire(blocking=False):
            return False
        try:
            signature = self.signature()
            if signature is not None and signature == self._signature:
                return False
            if path == self.assets_dir or self.assets_dir in path.parents:
                print("Assets changed; processing assets...")
                self.build_assets()
            else:
                print(f"Change detected in {path.name}; reloading...")
            self._signature = signature
            self.live_reload.notify()
            return True
        finally:
            self._last_change_at = time.time()
            self._change_lock.release()

    def build_assets(self) -> None:
        """Process assets into a staging directory, then swap it in."""
        staging = self.staging_dir
        if staging.exists():
            shutil.rmtree(staging)
        AssetPipeline(self.project_root, staging).run()
        if self.output_dir.exists():
            shutil.rmtree(self.output_dir)
        staging.rename(self.output_dir)


class _SourceEventHandler(FileSystemEventHandler):
    def __init__(self, server: DevServer):
        super().__init__()
        self.server = server

    def on_any_event(self, event):
        if event.is_directory:
            return
        path = Path(event.src_path)
        if IGNORED_PARTS.intersection(path.parts):
            return
        for generated in (self.server.output_dir, self.server.staging_dir):
            if path == generated or generated in path.parents:
                return
        self.server.on_change(path)
