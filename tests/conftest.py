import sys
from pathlib import Path

import pytest

# Ensure the project root is on sys.path so `import deskview` works without installation.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def make_desk_dict(desk_id, name, **overrides) -> dict:
    payload = {
        "id": desk_id,
        "name": name,
        "title": "Engineer",
        "location": "Lisbon",
        "profile": f"/profiles/{desk_id}.jpg",
        "decor": "/assets/decor.svg",
        "monitor": {"width": "37.54%", "height": "21.82%", "x": "20.70%", "y": "61.82%", "img": "/assets/monitor.svg"},
        "screen": {"width": "25.26%", "height": "16.36%", "x": "27.02%", "y": "63.27%", "firstPhoto": f"/photos/{desk_id}-1.jpg"},
        "photos": [f"/photos/{desk_id}-1.jpg", f"/photos/{desk_id}-2.jpg"],
        "social": {"facebook": None, "twitter": None, "linkedin": None, "website": None},
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def desk_dicts() -> list:
    return [
        make_desk_dict(1, "Ada Lovelace"),
        make_desk_dict(2, "Grace Hopper"),
        make_desk_dict(3, "Alan Turing"),
    ]


@pytest.fixture
def make_desk():
    return make_desk_dict
