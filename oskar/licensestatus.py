"""License states shown to the user."""

from __future__ import annotations

from enum import Enum


class LicenseStatus(Enum):
    """State of the installed license, with its caption, icon and style."""

    ACTIVATED = ("Etkinleştirildi", "check.png", "")
    DEMO = (
        "Ücretsiz deneme etkinleştirildi",
        "info.png",
        "background-color: yellow",
    )
    END_OF_DEMO = (
        "Ücretsiz deneme haklarınız tükenmiştir",
        "remove.png",
        "background-color: red",
    )

    def __init__(self, text: str, icon: str, style: str) -> None:
        self.text = text
        self.icon = icon
        self.style = style

    def __str__(self) -> str:
        return self.text