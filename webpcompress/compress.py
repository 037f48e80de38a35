from __future__ import annotations

import logging
import os
import subprocess
import sys
from pathlib import Path

from .errors import ExecutionError
from .models import CompressOptions, CompressResult
from .tools import ensure_ready, get_command

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = ".webp"
WINDOWS_CREATIONFLAGS = (
    getattr(subprocess, "CREATE_NO_WINDOW", 0) if sys.platform.startswith("win") else 0
)


def compress(image_filepath: str | os.PathLike[str], options: CompressOptions | None = None) -> CompressResult:
    """Encode ``image_filepath`` to WebP next to the source file.

    Input can be PNG, JPEG, TIFF, WebP or raw Y'CbCr samples; the encoder
    decides. Returns the encoder's stderr and the derived output path, which
    is not checked for existence. The call blocks until the encoder exits;
    from async code run it with ``await asyncio.to_thread(compress, path)``.

    Raises:
        UnsupportedPlatformError: no vendored encoder for this platform.
        InitializationError: the vendored binaries could not be made executable.
        ExecutionError: the encoder could not be started or failed.
    """
    cwebp = get_command("cwebp")
    ensure_ready()
    source = Path(image_filepath)
    output = build_output_path(source)
    command = [str(cwebp), *build_arguments(source, output, options)]
    existed = output.exists()
    logger.debug("Running %s", command)
    try:
        result = run_command(command)
    except OSError as error:
        discard_partial_output(output, existed)
        raise ExecutionError(str(error), None, command) from error
    if result.returncode != 0:
        discard_partial_output(output, existed)
        log = result.stderr or result.stdout or f"exit status {result.returncode}"
        logger.warning("cwebp failed on %s (status %s)", source, result.returncode)
        raise ExecutionError(log, result.returncode, command)
    return CompressResult(log=result.stderr, output_path=output)


def build_output_path(source: str | os.PathLike[str]) -> Path:
    """Swap everything from the last dot of the file name for ``.webp``.

    Directories are left alone and a name without a dot gets the suffix
    appended, so ``/a/.png`` becomes ``/a/.webp`` and ``scan`` becomes
    ``scan.webp``.
    """
    head, name = os.path.split(os.fspath(source))
    stem, dot, _ = name.rpartition(".")
    if not dot:
        stem = name
    return Path(os.path.join(head, stem + OUTPUT_SUFFIX))


def build_arguments(
    source: str | os.PathLike[str],
    output: str | os.PathLike[str],
    options: CompressOptions | None = None,
) -> list[str]:
    args = [path_argument(source), "-o", path_argument(output)]
    if options is None:
        return args
    if options.quality is not None:
        args += ["-q", str(options.quality)]
    if options.resize is not None:
        args += ["-resize", str(options.resize.width), str(options.resize.height)]
    if options.crop is not None:
        crop = options.crop
        args += ["-crop", str(crop.x_position), str(crop.y_position), str(crop.width), str(crop.height)]
    if options.lossless is not None:
        if options.lossless.level is not None:
            args += ["-z", str(options.lossless.level)]
        else:
            args.append("-lossless")
            if options.lossless.preserve_transparency:
                args.append("-exact")
    if options.near_lossless is not None:
        args += ["-near_lossless", str(options.near_lossless)]
    if options.alpha_quality is not None:
        args += ["-alpha_q", str(options.alpha_quality)]
    if options.preset is not None:
        args += ["-preset", options.preset]
    if options.compression_level is not None:
        args += ["-m", str(options.compression_level)]
    if options.multi_threaded:
        args.append("-mt")
    if options.low_memory:
        args.append("-low_memory")
    return args


def discard_partial_output(output: Path, existed: bool) -> None:
    # only files the failed run created
    if existed or not output.exists():
        return
    logger.warning("Removing partial output %s", output)
    try:
        output.unlink()
    except OSError as error:
        logger.warning("Could not remove partial output %s: %s", output, error)


def path_argument(path: str | os.PathLike[str]) -> str:
    value = os.fspath(path)
    # keep relative names like "-x.png" from being read as options
    if value.startswith("-"):
        return os.path.join(".", value)
    return value


def run_command(command: list[str]) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        command,
        capture_output=True,
        encoding="utf-8",
        errors="replace",
        creationflags=WINDOWS_CREATIONFLAGS,
    )
