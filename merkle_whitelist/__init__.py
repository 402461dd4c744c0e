"""
merkle-whitelist: Merkle-root set membership for allowlists.

Commit a member list to a single 32-byte root off-line, then check
membership claims against that root with a short sibling path.
"""

__version__ = "0.1.0"
