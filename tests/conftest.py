"""Shared pytest fixtures."""

from dataclasses import dataclass, field
from typing import Dict, Union

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from modbundle.models import BundleSettings


@dataclass
class FakeRemote:
    """Content served by the local GitHub/Thunderstore stand-in."""

    server: TestServer
    releases: Dict[str, dict] = field(default_factory=dict)
    pages: Dict[str, Union[str, bytes]] = field(default_factory=dict)
    files: Dict[str, bytes] = field(default_factory=dict)
    requests: list = field(default_factory=list)

    def url(self, path: str) -> str:
        return str(self.server.make_url(path))

    @property
    def api_base(self) -> str:
        return self.url("/api")

    @property
    def download_prefix(self) -> str:
        return self.url("/package/download/")

    def add_release(self, repo: str, assets: Dict[str, bytes]):
        self.releases[repo] = {
            "tag_name": "v1",
            "assets": [
                {"name": name, "browser_download_url": self.url(f"/files/{name}")}
                for name in assets
            ],
        }
        self.files.update(assets)

    def add_page(self, page: str, hrefs, content: bytes = b""):
        buttons = "\n".join(
            f'<a class="button" type="button" href="{href}">Download</a>'
            for href in hrefs
        )
        self.pages[page] = f"<html><body>\n{buttons}\n</body></html>"
        for href in hrefs:
            if href.startswith(self.download_prefix):
                self.files[href[len(self.download_prefix) :]] = content


@pytest.fixture
async def remote():
    app = web.Application()
    state = {}

    async def latest_release(request):
        remote = state["remote"]
        remote.requests.append(request.path)
        repo = f"{request.match_info['owner']}/{request.match_info['repo']}"
        if repo not in remote.releases:
            return web.json_response({"message": "Not Found"}, status=404)
        return web.json_response(remote.releases[repo])

    async def page(request):
        remote = state["remote"]
        remote.requests.append(request.path)
        name = request.match_info["name"]
        if name not in remote.pages:
            raise web.HTTPNotFound()
        content = remote.pages[name]
        if isinstance(content, bytes):
            return web.Response(body=content, content_type="text/html", charset="utf-8")
        return web.Response(text=content, content_type="text/html")

    async def download(request):
        remote = state["remote"]
        remote.requests.append(request.path)
        name = request.match_info["name"]
        if name not in remote.files:
            raise web.HTTPNotFound()
        return web.Response(
            body=remote.files[name], content_type="application/octet-stream"
        )

    async def truncated(request):
        state["remote"].requests.append(request.path)
        response = web.StreamResponse()
        response.content_length = 100000
        await response.prepare(request)
        await response.write(b"x" * 1000)
        # drop the connection before the declared length is sent
        request.transport.close()
        return response

    app.router.add_get("/api/repos/{owner}/{repo}/releases/latest", latest_release)
    app.router.add_get("/pages/{name}", page)
    app.router.add_get("/files/{name}", download)
    app.router.add_get("/broken/{name}", truncated)
    app.router.add_get("/package/download/{name:.*}", download)

    server = TestServer(app)
    await server.start_server()
    state["remote"] = FakeRemote(server=server)
    try:
        yield state["remote"]
    finally:
        await server.close()


@pytest.fixture
def settings(tmp_path) -> BundleSettings:
    (tmp_path / "tmp").mkdir()
    return BundleSettings(root=str(tmp_path), github_token="")


@pytest.fixture
def remote_settings(tmp_path, remote) -> BundleSettings:
    (tmp_path / "tmp").mkdir()
    return BundleSettings(
        root=str(tmp_path),
        github_api_base=remote.api_base,
        github_token="",
        thunderstore_download_prefix=remote.download_prefix,
    )

