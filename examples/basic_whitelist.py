"""
Basic Whitelist Example

Builds a whitelist root off-line, hands a member their proof, and checks
the member (and an outsider) against the published root through a
MembershipGate.
"""

from merkle_whitelist.membership import (
    MembershipGate,
    MembershipProof,
    build_tree,
    generate_proof,
)

WHITELIST = [
    "0x5B38Da6a701c568545dCfcB03FcB875f56beddC4",
    "0xAb8483F64d9C6d1EcF9b849Ae677dD3315835cb2",
    "0x4B20993Bc481177ec7E8f571ceCaE8A9e22C02db",
    "0x78731D3Ca6b7E34aC0F824c42a7cC18A495cabaB",
    "0x617F2E2fD72FD9D5503197092aC168c91465E7f2",
]
OUTSIDER = "0x17F6AD8Ef982297579C203069C1DbfFE4348c372"


def main():
    print("\n" + "=" * 70)
    print("merkle-whitelist - Basic Example")
    print("=" * 70)

    print("\n1. Building tree over the whitelist...")
    tree = build_tree(WHITELIST)
    print(f"   Members: {tree.leaf_count}, depth: {tree.depth}")
    print(f"   Root to publish: {tree.hex_root}")

    print("\n2. Generating proof for the first member...")
    artifact = generate_proof(tree, WHITELIST[0]).serialize()
    print(f"   CBOR artifact: {len(artifact)} bytes")

    print("\n3. Checking claims against the published root...")
    gate = MembershipGate(tree.root)
    proof = MembershipProof.deserialize(artifact)
    for caller in (WHITELIST[0], OUTSIDER):
        approved = gate.verify_membership(caller, proof.siblings, proof.wire_positions)
        status = "approved" if approved else "not approved"
        print(f"   {caller}: {status}")

    print("\n" + "=" * 70)


if __name__ == "__main__":
    main()
