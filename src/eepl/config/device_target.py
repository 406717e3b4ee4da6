"""
Device target definitions.

This module provides the DeviceTarget profile the pipeline compiles for and
loads it from the target descriptor (targetInfo.json) shipped with each device.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class DeviceTargetError(Exception):
    """Exception raised for device descriptor errors."""

    pass


@dataclass(frozen=True)
class DeviceTarget:
    """
    Embedded hardware profile selected by the user.

    Example targetInfo.json:
        {
            "description": "Nordic nRF52832",
            "devName": "nrf52",
            "triplet": "thumbv7em-none-none-eabi",
            "stdlib": "v7em",
            "runtime": "rt7M_tl"
        }

    Usage:
        device = DeviceTarget.from_descriptor(Path("devices/nrf52/targetInfo.json"))

        # Or create directly with known values
        device = DeviceTarget(
            description="Nordic nRF52832",
            dev_name="nrf52",
            triplet="thumbv7em-none-none-eabi",
            descriptor_path="devices/nrf52/targetInfo.json",
            stdlib="v7em",
        )
    """

    description: str
    dev_name: str
    triplet: str
    descriptor_path: str
    stdlib: str
    runtime: Optional[str] = None

    # Display name shown while nothing has been chosen
    UNSELECTED_DESCRIPTION = "[Device]"

    REQUIRED_FIELDS = ("description", "devName", "triplet", "stdlib")

    @property
    def is_selected(self) -> bool:
        """True unless this is the "no device selected" placeholder."""
        return self.description != self.UNSELECTED_DESCRIPTION

    @classmethod
    def from_descriptor(cls, descriptor_path: Path) -> "DeviceTarget":
        """
        Load a device target from its targetInfo.json descriptor.

        Args:
            descriptor_path: Path to targetInfo.json

        Returns:
            DeviceTarget instance whose descriptor_path is the given path

        Raises:
            DeviceTargetError: If the file is missing, unparseable, or lacks
                required fields
        """
        if not descriptor_path.exists():
            raise DeviceTargetError(f"Device descriptor not found: {descriptor_path}")

        try:
            data = json.loads(descriptor_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise DeviceTargetError(f"Failed to parse {descriptor_path}: {e}") from e

        if not isinstance(data, dict):
            raise DeviceTargetError(f"{descriptor_path} must contain a JSON object")

        missing = [key for key in cls.REQUIRED_FIELDS if not data.get(key)]
        if missing:
            raise DeviceTargetError(
                f"Device descriptor {descriptor_path} is missing required field(s): "
                + ", ".join(missing)
            )

        return cls(
            description=str(data["description"]),
            dev_name=str(data["devName"]),
            triplet=str(data["triplet"]),
            descriptor_path=descriptor_path.as_posix(),
            stdlib=str(data["stdlib"]),
            runtime=data.get("runtime") or None,
        )

    def __repr__(self) -> str:
        return (
            f"DeviceTarget(description='{self.description}', "
            f"dev_name='{self.dev_name}', triplet='{self.triplet}')"
        )


NO_DEVICE = DeviceTarget(
    description=DeviceTarget.UNSELECTED_DESCRIPTION,
    dev_name="",
    triplet="",
    descriptor_path="",
    stdlib="",
)
