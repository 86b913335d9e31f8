import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from tiktok_proxy.config.settings import config
from tiktok_proxy.infra.concurrency import extractor_limiter
from tiktok_proxy.main import app
from tiktok_proxy.services.ytdlp import CompletedProcess, SubprocessExecutor

@pytest.fixture(autouse=True)
def fresh_limiter(monkeypatch):
    """Each test runs on its own event loop, so the semaphore must not be shared"""
    monkeypatch.setattr(extractor_limiter, "_semaphore", None)

@pytest.fixture
def sample_info():
    return {
        "id": "7300000000000000000",
        "display_id": "7300000000000000000",
        "title": "Dance time",
        "description": "Check this #fun #2024tok out",
        "thumbnail": "https://p16.tiktokcdn.com/thumb.jpeg",
        "duration": 75,
        "filesize": 5 * 1024 * 1024,
        "filesize_approx": 6 * 1024 * 1024,
        "width": 576,
        "height": 1024,
        "ext": "mp4",
        "vcodec": "h264",
        "acodec": "aac",
        "fps": 30,
        "tbr": 1234.5,
        "asr": 48000,
        "audio_channels": 2,
        "uploader": "Creator Name",
        "uploader_id": "creator",
        "uploader_url": "https://www.tiktok.com/@creator",
        "view_count": 1000,
        "like_count": 100,
        "comment_count": 10,
        "repost_count": 5,
        "bookmark_count": 0,
        "track": "original sound - creator",
        "artist": "Creator Name",
        "upload_date": "20240115",
        "timestamp": 1700000000,
    }

class FakeExtractor:
    """Stands in for SubprocessExecutor and records every command it is given"""

    def __init__(self, returncode=0, stdout=b"", stderr=b"", payload=b"media-bytes", stderr_lines=(), raises=None):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.payload = payload
        self.stderr_lines = list(stderr_lines)
        self.raises = raises
        self.calls = []

    async def run(self, cmd, timeout):
        self.calls.append(list(cmd))
        return CompletedProcess(self.returncode, self.stdout, self.stderr)

    async def run_logged(self, cmd, timeout, on_stderr, is_disconnected=None, poll_interval=1.0):
        self.calls.append(list(cmd))
        for line in self.stderr_lines:
            on_stderr(line)
        if self.payload is not None:
            output_path = cmd[cmd.index("-o") + 1]
            with open(output_path, "wb") as f:
                f.write(self.payload)
        if self.raises is not None:
            raise self.raises
        return self.returncode

@pytest.fixture
def fake_extractor(monkeypatch):
    def install(**kwargs):
        fake = FakeExtractor(**kwargs)
        monkeypatch.setattr(SubprocessExecutor, "run", staticmethod(fake.run))
        monkeypatch.setattr(SubprocessExecutor, "run_logged", staticmethod(fake.run_logged))
        return fake
    return install

@pytest.fixture
def temp_dir(monkeypatch, tmp_path):
    target = tmp_path / "downloads"
    monkeypatch.setattr(config.extractor, "temp_dir", str(target))
    return target

@pytest_asyncio.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
