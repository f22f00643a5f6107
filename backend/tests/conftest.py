"""
测试配置文件

这个文件包含 pytest fixtures（测试夹具）。
Fixtures 是测试的"准备工作"——在测试运行前创建所需的对象和环境。

关键概念：
- upstream：模拟的上游日历服务器（httpx.MockTransport）
- client：指向 FastAPI 应用的 TestClient，上游请求全部走 upstream
"""

import sys
import asyncio
from io import BytesIO
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient
from PIL import Image

# 添加 backend 目录到 Python 路径
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from main import create_app
from ics_proxy import get_http_client


SAMPLE_ICS = (
    "BEGIN:VCALENDAR\r\n"
    "VERSION:2.0\r\n"
    "PRODID:-//Example//Calendar//EN\r\n"
    "BEGIN:VEVENT\r\n"
    "UID:1@example.com\r\n"
    "DTSTART:20260101T100000Z\r\n"
    "SUMMARY:Kickoff\r\n"
    "END:VEVENT\r\n"
    "END:VCALENDAR\r\n"
)


# ============================================
# Upstream Fixtures
# ============================================

class Upstream:
    """
    可编程的上游服务器。

    使用方式：
    ```python
    def test_x(client, upstream):
        upstream.respond(404)
        r = client.get("/api/fetch-ics", params={"url": "https://example.com/cal.ics"})
    ```
    """

    def __init__(self):
        self.requests = []
        self._handler = lambda request: httpx.Response(200, text=SAMPLE_ICS)

    def respond(self, status_code=200, **kwargs):
        self._handler = lambda request: httpx.Response(status_code, **kwargs)

    def raise_error(self, error):
        def handler(request):
            raise error
        self._handler = handler

    def __call__(self, request):
        self.requests.append(request)
        return self._handler(request)


@pytest.fixture
def upstream():
    return Upstream()


@pytest.fixture
def client(upstream):
    """
    TestClient，上游 httpx 客户端被替换为 MockTransport。

    每个测试都会得到一个全新的应用实例，测试结束后关闭模拟客户端。
    """
    app = create_app()
    mock_client = httpx.AsyncClient(transport=httpx.MockTransport(upstream), follow_redirects=True)
    app.dependency_overrides[get_http_client] = lambda: mock_client

    yield TestClient(app)

    # 清理：关闭模拟客户端
    asyncio.run(mock_client.aclose())


# ============================================
# Image Fixtures
# ============================================

@pytest.fixture
def png_bytes():
    """一个 4x4 的 PNG 图片"""
    buffer = BytesIO()
    Image.new("RGB", (4, 4), (255, 0, 0)).save(buffer, format="PNG")
    return buffer.getvalue()


class FakeProbe:
    """
    模拟浏览器的 Image 对象。

    设置 src 不会触发任何加载，测试自己调用 fire_load / fire_error。
    """

    def __init__(self):
        self.onload = None
        self.onerror = None
        self.src = None

    def fire_load(self):
        self.onload()

    def fire_error(self, error=None):
        self.onerror(error)


@pytest.fixture
def fake_probe():
    return FakeProbe()
