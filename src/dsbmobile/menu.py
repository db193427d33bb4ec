"""MenuTreeWalker - collects document URLs from the ResultMenuItems tree."""

from collections.abc import Iterator

from dsbmobile.errors import EmptyResultError
from dsbmobile.logging import get_logger
from dsbmobile.models import MenuNode, ResponseEnvelope

log = get_logger(__name__)


def iter_leaves(nodes: list[MenuNode]) -> Iterator[str]:
    """Yield leaf Detail URLs depth-first, in source order.

    Leaves without a Detail (or with an empty one) are skipped.
    """
    for node in nodes:
        if node.is_leaf:
            if node.detail:
                yield node.detail
        else:
            yield from iter_leaves(node.children)


def collect_leaves(tree: ResponseEnvelope | list[MenuNode] | MenuNode) -> list[str]:
    """Collect every document URL in the menu tree.

    Args:
        tree: A decoded response, its menu item list, or a single node.

    Returns:
        Leaf URLs in the order they appear in the source structure.

    Raises:
        EmptyResultError: If the tree holds no document reference.
    """
    if isinstance(tree, ResponseEnvelope):
        nodes = tree.result_menu_items
    elif isinstance(tree, MenuNode):
        nodes = [tree]
    else:
        nodes = tree

    leaves = list(iter_leaves(nodes))
    if not leaves:
        raise EmptyResultError("Timetable data could not be found")

    log.debug("menu_leaves_collected", count=len(leaves))
    return leaves
