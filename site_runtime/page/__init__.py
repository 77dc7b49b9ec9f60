"""Page model, collaborator contracts and shared decoration."""

from site_runtime.page.collaborators import FakeCollaborators
from site_runtime.page.decoration import build_auto_blocks, build_hero_block, decorate_main
from site_runtime.page.protocols import PageCollaborators, PageModel
from site_runtime.page.soup import SoupPage, add_class, create_element, has_class

__all__ = [
    "FakeCollaborators",
    "PageCollaborators",
    "PageModel",
    "SoupPage",
    "add_class",
    "build_auto_blocks",
    "build_hero_block",
    "create_element",
    "decorate_main",
    "has_class",
]
