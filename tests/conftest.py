import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from sap1_vm import SAP1Emulator


def make_image(*cells, data=None):
    """16-cell image: `cells` from $0 upward, `data` = {addr: value} overrides."""
    image = list(cells) + [0] * (16 - len(cells))
    for addr, value in (data or {}).items():
        image[addr] = value
    return image


@pytest.fixture
def emu_for():
    """Factory: emu_for(*cells, data={...}) -> fresh emulator."""
    def _make(*cells, data=None):
        return SAP1Emulator(make_image(*cells, data=data))
    return _make
