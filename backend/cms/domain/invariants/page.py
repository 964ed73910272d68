from .section import assert_section
from .exceptions import InvariantViolation

def assert_page(page):
    links = page.section_links

    orders = [link.order for link in links]
    expected = list(range(1, len(orders) + 1))

    if sorted(orders) != expected:
        raise InvariantViolation(
            f"Section orders are not consecutive starting from 1: {orders}"
        )

    seen = set()
    for link in links:
        # A section shared by several slots of the same page is validated once
        if link.section_id in seen:
            continue
        seen.add(link.section_id)
        assert_section(link.section)
