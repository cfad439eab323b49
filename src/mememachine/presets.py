"""One-click preset scenarios offered by ``mememachine preset``."""

PRESETS: dict[str, str] = {
    "monday": "when your alarm goes off on a Monday morning",
    "deadline": "pretending to work while the deadline is tomorrow",
    "diet": "trying to stay on a diet when someone brings donuts",
    "fine": "everything is on fire but I'm totally fine",
    "smart": "when you finally understand something after an hour",
    "excuse": "making up an excuse for being late",
}


def get_preset(name: str) -> str | None:
    """Return the scenario for preset *name* (case-insensitive), or None."""
    return PRESETS.get(name.strip().lower())
