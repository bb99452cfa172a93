import os

import pytest

CHAIN_DEPTH = 1000


@pytest.fixture
def deep_chain(tmp_path):
    """deep/a/a/.../a, CHAIN_DEPTH levels, a 1-byte file per level and 5 bytes at the bottom.

    Built and removed level by level: recursive helpers (Path.mkdir(parents=True),
    shutil.rmtree on older Pythons) can overflow the stack on a chain this deep.
    """
    root = str(tmp_path / "deep")
    os.mkdir(root)
    bottom = root
    for _ in range(CHAIN_DEPTH):
        bottom = os.path.join(bottom, "a")
        os.mkdir(bottom)
        with open(os.path.join(bottom, "f"), "wb") as f:
            f.write(b"x")
    leaf = os.path.join(bottom, "leaf.bin")
    with open(leaf, "wb") as f:
        f.write(b"12345")

    yield root, CHAIN_DEPTH + 5

    os.remove(leaf)
    while bottom != root:
        os.remove(os.path.join(bottom, "f"))
        os.rmdir(bottom)
        bottom = os.path.dirname(bottom)
    os.rmdir(root)
