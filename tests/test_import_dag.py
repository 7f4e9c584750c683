import os
import subprocess
import sys
from pathlib import Path

SRC = Path(__file__).resolve().parents[1] / "src"


def test_package_import_does_not_load_cli_or_polars():
    # Run in a clean Python process to avoid pollution from other tests
    code = r"""
import sys
import corresponding  # noqa: F401

forbidden = ["corresponding.cli", "corresponding.io.report", "polars"]
present = [m for m in forbidden if m in sys.modules]
print(",".join(present))
"""
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(p for p in (str(SRC), env.get("PYTHONPATH", "")) if p)
    proc = subprocess.run(
        [sys.executable, "-c", code], capture_output=True, text=True, check=True, env=env
    )
    assert proc.stdout.strip() == ""
