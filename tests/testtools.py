from typing import Any


def make_client(klass: str = "kitty", **props: Any) -> dict[str, Any]:
    "Return a client as listed by `hyprctl -j clients`"
    client = {
        "address": "0x1",
        "mapped": True,
        "hidden": False,
        "at": [0, 0],
        "size": [640, 480],
        "workspace": {"id": 1, "name": "1"},
        "floating": False,
        "monitor": 0,
        "class": klass,
        "title": klass,
        "initialClass": klass,
        "initialTitle": klass,
        "pid": 1000,
        "xwayland": False,
        "pinned": False,
        "fullscreen": 0,
        "grouped": [],
        "swallowing": "0x0",
        "focusHistoryID": 0,
    }
    client.update(props)
    return client


def make_entry(klass: str = "kitty", cmd: str = "", **props: Any) -> dict[str, Any]:
    "Return a saved session entry"
    entry = make_client(klass, **props)
    entry["cmd"] = cmd or klass
    return entry
