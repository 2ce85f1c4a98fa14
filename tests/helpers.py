"""測試共用的假 Figma payload."""


def make_node(name="Node", type="FRAME", children=None, **kwargs):
    node = {"id": f"{name}-id", "name": name, "type": type, "children": children or []}
    node.update(kwargs)
    return node


def solid(r, g, b, a=1.0):
    return {"type": "SOLID", "color": {"r": r, "g": g, "b": b, "a": a}}


def make_file_payload(document=None, components=None, styles=None, **kwargs):
    payload = {
        "name": "Design System",
        "version": "1234",
        "lastModified": "2026-01-01T00:00:00Z",
        "schemaVersion": 0,
        "document": document or make_node("Document", "DOCUMENT"),
        "components": {} if components is None else components,
        "styles": {} if styles is None else styles,
    }
    payload.update(kwargs)
    return payload


def button_file_payload():
    """一個 RECTANGLE 'Button'：紅色 fill + 12px 圓角，無 bounding box."""
    button = make_node("Button", "RECTANGLE", fills=[solid(1, 0, 0)], cornerRadius=12)
    page = make_node("Page 1", "CANVAS", children=[button])
    return make_file_payload(document=make_node("Document", "DOCUMENT", children=[page]))
