from .block import assert_block_order, assert_block_kind

def assert_section(section):
    links = section.block_links

    assert_block_order(links)

    for link in links:
        assert_block_kind(link.block)
