from __future__ import annotations

import stat
import sys
from pathlib import Path

import pytest
from PIL import Image

from webpcompress import tools

FAKE_CWEBP = """\
#!{python}
import json
import os
import sys

args = sys.argv[1:]
record = os.environ.get("FAKE_CWEBP_RECORD")
if record:
    with open(record, "w", encoding="utf-8") as handle:
        json.dump(args, handle)
source, output = args[0], args[2]
if not os.path.exists(source):
    sys.stderr.write("Error! Could not process file " + source + "\\n")
    sys.exit(255)
with open(output, "wb") as handle:
    handle.write(b"RIFF")
if os.environ.get("FAKE_CWEBP_FAIL"):
    sys.stderr.write("Error! Cannot encode picture as WebP\\n")
    sys.exit(1)
sys.stderr.write("Saving file '" + output + "'\\n")
"""


@pytest.fixture(autouse=True)
def reset_ready():
    tools.reset_ready()
    yield
    tools.reset_ready()


@pytest.fixture
def vendor_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    root = tmp_path / "vendor"
    for folder in tools.PLATFORM_DIRS.values():
        (root / folder).mkdir(parents=True)
    monkeypatch.setenv(tools.VENDOR_DIR_ENV, str(root))
    return root


@pytest.fixture
def fake_encoder(vendor_dir: Path) -> Path:
    """Install a scripted cwebp/dwebp pair for the current platform, not yet executable."""
    if sys.platform.startswith("win"):
        pytest.skip("scripted encoder needs a shebang-capable platform")
    platform_dir = vendor_dir / tools.PLATFORM_DIRS[tools.detect_platform()]
    cwebp = platform_dir / "cwebp"
    cwebp.write_text(FAKE_CWEBP.format(python=sys.executable), encoding="utf-8")
    dwebp = platform_dir / "dwebp"
    dwebp.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
    for path in (cwebp, dwebp):
        path.chmod(stat.S_IRUSR | stat.S_IWUSR)
    return cwebp


@pytest.fixture
def png_file(tmp_path: Path) -> Path:
    path = tmp_path / "images" / "sample.png"
    path.parent.mkdir()
    Image.new("RGBA", (32, 24), (200, 40, 40, 255)).save(path, format="PNG")
    return path
