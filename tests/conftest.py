import sys
from pathlib import Path

import pytest

# Ensure src is in path
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

def _make_tree(root: Path, entries):
    """Create files (plain names) and directories (names ending in '/') under root"""
    root.mkdir(parents=True, exist_ok=True)
    for entry in entries:
        path = root / entry
        if entry.endswith("/"):
            path.mkdir(parents=True, exist_ok=True)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("")
    return root

@pytest.fixture
def make_tree():
    """Factory fixture building a partition tree"""
    return _make_tree

@pytest.fixture
def vendor_tree(tmp_path):
    """Small vendor partition covering bin/hw, etc and firmware"""
    return _make_tree(tmp_path / "vendor", [
        "bin/hw/android.hardware.foo",
        "etc/init/vold.rc",
        "firmware/a.bin",
    ])
