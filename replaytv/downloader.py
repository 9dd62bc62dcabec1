"""Download resolved HLS streams to disk."""

import logging
import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

log = logging.getLogger(__name__)


def find_ffmpeg() -> str | None:
    """Find ffmpeg executable."""
    for p in ("ffmpeg", "ffmpeg.exe"):
        if shutil.which(p):
            return p
    return None


def find_ytdlp() -> str | None:
    """Find yt-dlp executable."""
    for p in ("yt-dlp", "yt-dlp.exe"):
        if shutil.which(p):
            return p
    return None


def ffmpeg_args(ffmpeg: str, url: str, output_path: Path) -> list[str]:
    return [
        ffmpeg,
        "-y",  # Overwrite output
        "-hide_banner",
        "-loglevel", "error",
        "-i", url,
        "-c", "copy",  # Copy streams without re-encoding
        "-bsf:a", "aac_adtstoasc",
        str(output_path),
    ]


def ytdlp_args(ytdlp: str, url: str, output_path: Path) -> list[str]:
    return [
        ytdlp,
        url,
        "-o", str(output_path),
        "--no-warnings",
        "--newline",
        "--merge-output-format", "mp4",
    ]


def parse_progress(line: str) -> float | None:
    """Extract the percentage of a yt-dlp ``[download]  45.2% of ...`` line."""
    if "[download]" not in line:
        return None
    for part in line.split():
        if part.endswith("%"):
            try:
                return float(part[:-1])
            except ValueError:
                return None
    return None


def download_with_ffmpeg(url: str, output_path: Path) -> bool:
    """Copy an HLS stream into an mp4 container. Returns True if successful."""
    ffmpeg = find_ffmpeg()
    if not ffmpeg:
        log.error("ffmpeg not found. Please install it.")
        return False

    try:
        result = subprocess.run(ffmpeg_args(ffmpeg, url, output_path), capture_output=True, text=True)
    except OSError as e:
        log.error("ffmpeg error: %s", e)
        return False
    if result.returncode != 0:
        log.error("ffmpeg failed: %s", result.stderr.strip())
    return result.returncode == 0


def download_with_ytdlp(
    url: str,
    output_path: Path,
    progress_callback: Callable[[float], None] | None = None,
) -> bool:
    """Download with yt-dlp, reporting progress. Returns True if successful."""
    ytdlp = find_ytdlp()
    if not ytdlp:
        log.error("yt-dlp not found. Please install it: pip install yt-dlp")
        return False

    try:
        process = subprocess.Popen(
            ytdlp_args(ytdlp, url, output_path),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except OSError as e:
        log.error("yt-dlp error: %s", e)
        return False

    for line in process.stdout:  # type: ignore
        pct = parse_progress(line.strip())
        if pct is not None and progress_callback:
            progress_callback(pct)

    process.wait()
    return process.returncode == 0


def download(url: str, output_path: Path, use_ytdlp: bool = False) -> Path | None:
    """
    Download a stream URL to ``output_path``.

    ffmpeg is used unless ``use_ytdlp`` is set or ffmpeg is missing.
    Partial files are removed on failure.

    Returns:
        The output path if successful, None otherwise
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    log.info("Downloading to: %s", output_path)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        transient=True,
    ) as progress:
        task = progress.add_task(f"Downloading {output_path.name}...", total=100)

        if (use_ytdlp or not find_ffmpeg()) and find_ytdlp():
            success = download_with_ytdlp(
                url,
                output_path,
                progress_callback=lambda pct: progress.update(task, completed=pct),
            )
        else:
            success = download_with_ffmpeg(url, output_path)

        if success:
            progress.update(task, completed=100)
            return output_path

    if output_path.exists():
        output_path.unlink()
    return None


def is_download_available() -> bool:
    """Check if downloading is possible."""
    return find_ffmpeg() is not None or find_ytdlp() is not None
