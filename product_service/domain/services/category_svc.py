import logging
from collections import defaultdict
from typing import Any, Dict, List, Optional

from product_service.core.exceptions import CategoryNotFoundError, InvalidRequestError, SlugTakenError
from product_service.domain.models.category import Category, CategoryNode

logger = logging.getLogger(__name__)


def _node(cat: Category) -> CategoryNode:
    return CategoryNode(id=cat.id, name=cat.name, slug=cat.slug, parentslug=cat.parentslug, filters=cat.filters)


def build_category_tree(categories: List[Category]) -> List[CategoryNode]:
    """
    Assemble the category forest from a flat list.

    - Categories without a parent, or whose parent does not exist, are roots.
    - Iterative traversal with a visited set, so a parent cycle can never loop.
    - Categories only reachable through a cycle are attached as extra roots
      (one per cycle) and logged.
    """
    by_id = {c.id: c for c in categories}
    children: Dict[str, List[Category]] = defaultdict(list)
    roots: List[Category] = []
    for cat in categories:
        if cat.parent and cat.parent in by_id and cat.parent != cat.id:
            children[cat.parent].append(cat)
        else:
            if cat.parent:
                logger.warning("category parent unresolved slug=%s parent=%s", cat.slug, cat.parent)
            roots.append(cat)

    visited = set()

    def build(root: Category) -> CategoryNode:
        root_node = _node(root)
        visited.add(root.id)
        stack = [(root, root_node)]
        while stack:
            cat, node = stack.pop()
            for child in children[cat.id]:
                if child.id in visited:
                    continue
                visited.add(child.id)
                child_node = _node(child)
                node.subcategories.append(child_node)
                stack.append((child, child_node))
        return root_node

    tree = [build(r) for r in roots]
    for cat in categories:
        if cat.id not in visited:
            logger.warning("category cycle detected, detaching at slug=%s", cat.slug)
            tree.append(build(cat))
    return tree


async def get_category_tree(categories) -> List[CategoryNode]:
    return build_category_tree(await categories.list_all())


async def get_category(categories, slug: str) -> Category:
    category = await categories.get_by_slug(slug)
    if category is None:
        raise CategoryNotFoundError(slug)
    return category


async def create_category(
    categories,
    name: Optional[str],
    slug: Optional[str],
    parentslug: Optional[str] = None,
    filters: Optional[List[Dict[str, Any]]] = None,
) -> Category:
    if not name or not slug:
        raise InvalidRequestError("Name and slug are required")

    if await categories.get_by_slug(slug):
        raise SlugTakenError("Category", slug)

    parent = None
    if parentslug and parentslug != "none":
        parent = await categories.get_by_slug(parentslug)
        if parent is None:
            raise CategoryNotFoundError(parentslug, parent=True)

    created = await categories.create({
        "name": name,
        "slug": slug,
        "parent": parent.id if parent else None,
        "parentslug": parent.slug if parent else None,
        "filters": filters or [],
    })
    logger.info("category created slug=%s parent=%s", created.slug, created.parentslug)
    return created
