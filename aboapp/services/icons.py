"""
AboApp Backend — Icon Key Inference
=====================================

Maps free-text provider names to a fixed set of icon identifiers.

Rule order matters: the first rule whose token occurs in the lowercased
provider text wins. Broad tokens ("apple", "ps") sit below the specific
brands that could otherwise be shadowed by them.
"""

from typing import Dict, Optional, Tuple

GENERIC_ICON = "generic"

# key → emoji shown when the client has no image for the key
ICON_EMOJI: Dict[str, str] = {
    "netflix": "🎬",
    "spotify": "🎵",
    "prime": "🛒",
    "disney": "🐭",
    "adobe": "🖌️",
    "psplus": "🎮",
    "xbox": "🎮",
    "icloud": "☁️",
    "onedrive": "☁️",
    "youtube": "▶️",
    "apple": "",
    "google": "🟢",
    "uber": "🚗",
    "wolt": "🥡",
    GENERIC_ICON: "🔔",
}

ICON_KEYS = frozenset(ICON_EMOJI)

ICON_RULES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("spotify",), "spotify"),
    (("netflix",), "netflix"),
    (("prime", "amazon"), "prime"),
    (("disney",), "disney"),
    (("adobe",), "adobe"),
    (("icloud", "apple"), "icloud"),
    (("onedrive", "microsoft"), "onedrive"),
    (("xbox", "game pass"), "xbox"),
    (("ps", "playstation"), "psplus"),
    (("youtube",), "youtube"),
    (("google",), "google"),
    (("uber",), "uber"),
    (("wolt",), "wolt"),
)


def infer_icon_key(provider: Optional[str]) -> str:
    """
    Icon key for a provider string. Total: every input maps to a key in
    ICON_KEYS, empty or unknown input to 'generic'.
    """
    text = (provider or "").strip().lower()
    if not text:
        return GENERIC_ICON
    for tokens, key in ICON_RULES:
        if any(token in text for token in tokens):
            return key
    # exact key fallback; keys without an emoji do not count
    if ICON_EMOJI.get(text):
        return text
    return GENERIC_ICON


def icon_emoji(icon_key: Optional[str]) -> str:
    return ICON_EMOJI.get(icon_key or GENERIC_ICON) or ICON_EMOJI[GENERIC_ICON]
