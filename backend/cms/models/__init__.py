from .user import User
from .page import Page, PageSection, PAGE_STATUSES
from .section import Section, BlockSection, SECTION_TYPES
from .block import Block, BlockKind
from .post import Post, Tag, post_tag
from .media import Media
from .html_content import HtmlContent
from .menu import Menu, MenuItem
from .audit_log import AuditLog

__all__ = [
    "User",
    "Page",
    "PageSection",
    "PAGE_STATUSES",
    "Section",
    "BlockSection",
    "SECTION_TYPES",
    "Block",
    "BlockKind",
    "Post",
    "Tag",
    "post_tag",
    "Media",
    "HtmlContent",
    "Menu",
    "MenuItem",
    "AuditLog",
]
