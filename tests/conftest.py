"""
Shared fixtures: a fake eec toolchain tree, a device descriptor, and a
workspace with an eepl.ini.
"""

import json

import pytest

from eepl.config import BuildConfig, BuildOptions, DeviceTarget, Preset
from eepl.packages import ExecutableRole, Toolchain


@pytest.fixture
def toolchain_root(tmp_path):
    """Toolchain install root with every binary present."""
    root = tmp_path / ".eec"
    bin_dir = root / "bin"
    bin_dir.mkdir(parents=True)
    for role in ExecutableRole:
        (bin_dir / role.binary_name).write_text("")
    return root


@pytest.fixture
def toolchain(toolchain_root):
    return Toolchain(toolchain_root)


@pytest.fixture
def device_descriptor(tmp_path):
    """targetInfo.json for an nrf52 device."""
    device_dir = tmp_path / "devices" / "nrf52"
    device_dir.mkdir(parents=True)
    descriptor = device_dir / "targetInfo.json"
    descriptor.write_text(
        json.dumps(
            {
                "description": "Nordic nRF52832",
                "devName": "nrf52",
                "triplet": "thumbv7em-none-none-eabi",
                "stdlib": "v7em",
                "runtime": "rt7M_tl",
            }
        )
    )
    return descriptor


@pytest.fixture
def device(device_descriptor):
    return DeviceTarget.from_descriptor(device_descriptor)


@pytest.fixture
def workspace(tmp_path):
    workspace_dir = tmp_path / "ws"
    workspace_dir.mkdir()
    return workspace_dir


@pytest.fixture
def build_config(workspace, device):
    return BuildConfig(
        workspace_dir=workspace,
        options=BuildOptions(preset=Preset.RELEASE),
        device=device,
        input_file="main.es",
    )
