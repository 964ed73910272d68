from cms.domain.exceptions import ValidationError

LINKABLE_TYPES = ("page", "post")


def validate_menu_tree(nodes, path="tree"):
    """Shape of a submitted menu tree; sibling labels must be unique."""
    if not isinstance(nodes, list):
        raise ValidationError(f"{path} must be a list")

    labels = set()
    for index, node in enumerate(nodes):
        node_path = f"{path}[{index}]"
        if not isinstance(node, dict) or node.get("id") in (None, ""):
            raise ValidationError(f"{node_path}.id is required")

        label = node.get("label")
        if not isinstance(label, str) or not label.strip():
            raise ValidationError(f"{node_path}.label is required")
        if label in labels:
            raise ValidationError(f"Duplicate label '{label}' among siblings in {path}")
        labels.add(label)

        if node.get("url") is not None and not isinstance(node["url"], str):
            raise ValidationError(f"{node_path}.url must be a string")

        if node.get("is_visible") is not None and not isinstance(node["is_visible"], bool):
            raise ValidationError(f"{node_path}.is_visible must be a boolean")

        linkable_type = node.get("linkable_type")
        if linkable_type is not None and linkable_type not in LINKABLE_TYPES:
            raise ValidationError(f"{node_path}.linkable_type must be one of {', '.join(LINKABLE_TYPES)}")

        children = node.get("children")
        if children is not None:
            validate_menu_tree(children, f"{node_path}.children")


def validate_menu_payload(data, require_tree=True):
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    if not isinstance(data.get("name"), str) or not data["name"].strip():
        raise ValidationError("name is required")

    if data.get("slug") is not None and not isinstance(data["slug"], str):
        raise ValidationError("slug must be a string")

    if require_tree or "tree" in data:
        validate_menu_tree(data.get("tree", []))

    return data


def validate_menu_item_payload(data, partial=False):
    """Single item add/update; partial updates only check the keys sent."""
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    if not partial or "label" in data:
        label = data.get("label")
        if not isinstance(label, str) or not label.strip():
            raise ValidationError("label is required")
        if len(label) > 120:
            raise ValidationError("label must be at most 120 characters")

    for field in ("parent_id", "position", "linkable_id"):
        value = data.get(field)
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            raise ValidationError(f"{field} must be an integer")

    if data.get("position") is not None and data["position"] < 0:
        raise ValidationError("position must be zero or greater")

    url = data.get("url")
    if url is not None and (not isinstance(url, str) or len(url) > 255):
        raise ValidationError("url must be a string of at most 255 characters")

    if data.get("is_visible") is not None and not isinstance(data["is_visible"], bool):
        raise ValidationError("is_visible must be a boolean")

    if data.get("meta") is not None and not isinstance(data["meta"], dict):
        raise ValidationError("meta must be an object")

    linkable_type = data.get("linkable_type")
    if linkable_type is not None and linkable_type not in LINKABLE_TYPES:
        raise ValidationError(f"linkable_type must be one of {', '.join(LINKABLE_TYPES)}")

    return data
