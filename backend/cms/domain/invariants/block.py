from cms.models.block import BlockKind
from .exceptions import InvariantViolation

VALID_KINDS = {kind.value for kind in BlockKind}

def assert_block_order(links):
    """Block pivots of a section carry one counter across all columns: 1..N."""
    orders = [link.order for link in links]
    if not orders:
        return

    expected = list(range(1, len(orders) + 1))
    if sorted(orders) != expected:
        raise InvariantViolation(
            f"Block orders are not consecutive starting from 1: {orders}"
        )

def assert_block_kind(block):
    if block.kind not in VALID_KINDS:
        raise InvariantViolation(
            f"Block {block.id} has unknown kind '{block.kind}'."
        )
    if block.target_id is None:
        raise InvariantViolation(
            f"Block {block.id} does not reference any content."
        )
