from typing import Awaitable, Callable, List, NamedTuple, Optional
from contextlib import suppress
import asyncio
import logging
from tiktok_proxy.config.settings import config
from tiktok_proxy.core.errors import ExtractorError, ExtractorErrorKind
from tiktok_proxy.infra.concurrency import extractor_limiter
from tiktok_proxy.models.internal import MediaKind

logger = logging.getLogger(__name__)

DisconnectCheck = Callable[[], Awaitable[bool]]
StderrSink = Callable[[str], None]

class CompletedProcess(NamedTuple):
    """Subprocess result"""
    returncode: int
    stdout: bytes
    stderr: bytes

async def _kill(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        with suppress(ProcessLookupError):
            process.kill()
        await process.wait()

class SubprocessExecutor:
    """Execute extractor subprocesses with consistent error handling"""

    @staticmethod
    async def _spawn(cmd: List[str], stdout: int, stderr: int) -> asyncio.subprocess.Process:
        try:
            return await asyncio.create_subprocess_exec(
                *cmd,
                stdout=stdout,
                stderr=stderr,
                stdin=asyncio.subprocess.DEVNULL
            )
        except OSError as e:
            raise ExtractorError(ExtractorErrorKind.SPAWN_FAILURE, f"{cmd[0]}: {e}") from e

    @staticmethod
    async def run(cmd: List[str], timeout: float) -> CompletedProcess:
        """
        Run subprocess to completion, collecting stdout and stderr.
        The child is killed on timeout or cancellation so it never outlives the request.
        """
        async with extractor_limiter.slot():
            process = await SubprocessExecutor._spawn(
                cmd, asyncio.subprocess.PIPE, asyncio.subprocess.PIPE
            )
            try:
                stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
            except asyncio.TimeoutError:
                raise ExtractorError(
                    ExtractorErrorKind.TIMEOUT, f"no exit after {timeout:g}s"
                ) from None
            finally:
                await _kill(process)

            return CompletedProcess(
                returncode=process.returncode,
                stdout=stdout,
                stderr=stderr
            )

    @staticmethod
    async def run_logged(
        cmd: List[str],
        timeout: float,
        on_stderr: StderrSink,
        is_disconnected: Optional[DisconnectCheck] = None,
        poll_interval: float = 1.0
    ) -> int:
        """
        Run subprocess whose stdout is discarded, handing every stderr line to
        on_stderr as it arrives. Returns the exit code.

        When is_disconnected is given it is polled every poll_interval seconds
        and a positive answer kills the child.
        """
        async with extractor_limiter.slot():
            process = await SubprocessExecutor._spawn(
                cmd, asyncio.subprocess.DEVNULL, asyncio.subprocess.PIPE
            )

            async def drain_stderr():
                while True:
                    line = await process.stderr.readline()
                    if not line:
                        break
                    decoded = line.decode(errors="replace").rstrip()
                    if decoded:
                        on_stderr(decoded)

            async def watch_disconnect():
                while True:
                    await asyncio.sleep(poll_interval)
                    if await is_disconnected():
                        return

            stderr_task = asyncio.create_task(drain_stderr())
            wait_task = asyncio.create_task(process.wait())
            watch_task = asyncio.create_task(watch_disconnect()) if is_disconnected else None

            try:
                pending = {wait_task, watch_task} - {None}
                done, _ = await asyncio.wait(
                    pending, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
                )
                if not done:
                    raise ExtractorError(ExtractorErrorKind.TIMEOUT, f"no exit after {timeout:g}s")
                if wait_task not in done:
                    raise ExtractorError(ExtractorErrorKind.DISCONNECTED, "client went away")

                # Let stderr reach EOF so no trailing line is lost
                with suppress(asyncio.TimeoutError):
                    await asyncio.wait_for(asyncio.shield(stderr_task), timeout=5.0)
                return wait_task.result()
            finally:
                await _kill(process)
                for task in (stderr_task, wait_task, watch_task):
                    if task is not None and not task.done():
                        task.cancel()
                        with suppress(asyncio.CancelledError):
                            await task

class YTDLPCommandBuilder:
    """Build yt-dlp commands as argument vectors (never shell strings)"""

    @staticmethod
    def _base() -> List[str]:
        return [
            config.extractor.binary,
            '--no-playlist',
            '--socket-timeout', str(config.extractor.socket_timeout),
            '--retries', str(config.extractor.retries),
        ]

    @staticmethod
    def build_info_command(url: str) -> List[str]:
        """Build command for dumping a single JSON metadata document"""
        cmd = YTDLPCommandBuilder._base()
        cmd.append('--dump-json')
        # "--" ends option parsing so the URL is never read as a flag
        cmd.extend(['--', url])
        return cmd

    @staticmethod
    def build_download_command(url: str, kind: MediaKind, output_path: str) -> List[str]:
        """Build command for fetching and converting into output_path"""
        cmd = YTDLPCommandBuilder._base()

        if kind is MediaKind.VIDEO:
            cmd.extend(['--format', 'best[ext=mp4]'])
        else:
            cmd.extend(['--extract-audio', '--audio-format', 'mp3'])

        cmd.extend([
            '--force-overwrites',
            '--no-progress',
            '-o', output_path,
            '--', url,
        ])
        return cmd

    @staticmethod
    def build_version_command() -> List[str]:
        return [config.extractor.binary, '--version']

async def detect_ytdlp_version() -> str:
    """Best-effort version probe used by the health endpoint"""
    try:
        result = await SubprocessExecutor.run(YTDLPCommandBuilder.build_version_command(), timeout=10.0)
    except ExtractorError as e:
        logger.warning(f"yt-dlp version probe failed: {e}")
        return "unknown"
    if result.returncode != 0:
        return "unknown"
    return result.stdout.decode(errors="replace").strip() or "unknown"
