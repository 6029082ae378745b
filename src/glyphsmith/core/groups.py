"""Expansion of ``$group`` / ``@group`` references in rule data."""

from collections.abc import Iterable, Mapping

from glyphsmith.exceptions import UnknownGroupError

GROUP_PREFIXES = ("$", "@")


def is_group_reference(item: str) -> bool:
    """Check whether a rule item names a group rather than a glyph."""
    return item.startswith(GROUP_PREFIXES)


def expand_members(
    items: Iterable[str] | None,
    groups: Mapping[str, Iterable[str]],
) -> list[str]:
    """Expand group references into concrete glyph names.

    References are expanded recursively. A group already visited during this
    expansion is not expanded again, so cyclic group definitions terminate.
    Order of first appearance is preserved and duplicates are dropped.

    Args:
        items: Glyph names and group references
        groups: Group name (without prefix) to member list

    Returns:
        Concrete glyph names

    Raises:
        UnknownGroupError: If a reference names a group that does not exist
    """
    result: dict[str, None] = {}
    visited: set[str] = set()

    def visit(item: str) -> None:
        item = item.strip()
        if not item:
            return
        if not is_group_reference(item):
            result.setdefault(item, None)
            return

        group_name = item[1:]
        if group_name in visited:
            return
        visited.add(group_name)
        if group_name not in groups:
            raise UnknownGroupError(group_name)
        for member in groups[group_name]:
            visit(member)

    for item in items or ():
        visit(item)
    return list(result)


def is_member(
    name: str,
    items: Iterable[str] | None,
    groups: Mapping[str, Iterable[str]],
) -> bool:
    """Check whether ``name`` appears in ``items`` after group expansion."""
    return name in expand_members(items, groups)
