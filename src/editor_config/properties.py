"""Property tree helpers: copying, key extraction and visibility counts."""

from collections.abc import Iterable, Iterator

from .models import PropertyGroup


def deep_clone_property_groups(groups: Iterable[PropertyGroup]) -> list[PropertyGroup]:
    """Copy a group tree so the caller's definition is never touched."""
    return [group.model_copy(deep=True) for group in groups]


def _property_keys(group: PropertyGroup) -> Iterator[str]:
    for prop in group.properties or []:
        key = prop.get("key") if isinstance(prop, dict) else None
        if isinstance(key, str):
            yield key


def _walk_keys(group: PropertyGroup) -> Iterator[str]:
    yield from _property_keys(group)
    for nested in group.nested_groups or []:
        yield from _walk_keys(nested)


def extract_all_property_keys(groups: Iterable[PropertyGroup]) -> list[str]:
    """
    Collect every property key in a group tree.

    Walks depth-first through properties and nested groups. Properties
    without a string ``key`` are skipped.

    Returns:
        Sorted list of distinct keys
    """
    keys: set[str] = set()
    for group in groups:
        keys.update(_walk_keys(group))
    return sorted(keys)


def count_visible_properties(group: PropertyGroup, visible_keys: set[str] | None) -> int:
    """Count properties of a group and its nested groups that are visible.

    With ``visible_keys`` of None every property counts.
    """
    if group.properties is None:
        direct = 0
    elif visible_keys is None:
        direct = len(group.properties)
    else:
        direct = sum(1 for key in _property_keys(group) if key in visible_keys)

    nested = sum(count_visible_properties(child, visible_keys) for child in group.nested_groups or [])
    return direct + nested


def _group_path(parent_path: str, caption: str) -> str:
    if not parent_path:
        return caption
    if not caption:
        return parent_path
    return f"{parent_path}.{caption}"


def count_groups(groups: Iterable[PropertyGroup], visible_keys: list[str] | None) -> dict[str, int]:
    """
    Map each group path to its visible property count.

    Paths join captions with ``.``; a group without a caption shares its
    parent's path and groups with an empty path are not recorded.
    """
    keys = set(visible_keys) if visible_keys is not None else None
    counts: dict[str, int] = {}

    def visit(group: PropertyGroup, parent_path: str) -> None:
        path = _group_path(parent_path, group.caption or "")
        if path:
            counts[path] = count_visible_properties(group, keys)
        for nested in group.nested_groups or []:
            visit(nested, path)

    for group in groups:
        visit(group, "")
    return counts
