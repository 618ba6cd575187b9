"""Self-bid detection.

User ids are UUID strings; comparison is case-insensitive so a token
carrying an upper-case UUID cannot slip past a lower-case seller_id.
"""


def is_self_bid(bidder_id: str, seller_id: str) -> bool:
    return str(bidder_id).lower() == str(seller_id).lower()
