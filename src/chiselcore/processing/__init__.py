"""
Tree cleaning, tag conversion and boilerplate pruning.
"""

from .cleaning import prune_html, prune_unwanted_nodes, prune_unwanted_sections, tree_cleaning
from .convert import convert_tags
from .link_density import delete_by_link_density, link_density_test, link_density_test_tables

__all__ = [
    "convert_tags",
    "delete_by_link_density",
    "link_density_test",
    "link_density_test_tables",
    "prune_html",
    "prune_unwanted_nodes",
    "prune_unwanted_sections",
    "tree_cleaning",
]
