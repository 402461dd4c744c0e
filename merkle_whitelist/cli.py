"""
Command-Line Interface for merkle-whitelist

Off-line tooling: compute the root to publish, export per-member proofs,
and check a proof against a published root.
"""

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from merkle_whitelist import __version__
from merkle_whitelist.membership import (
    MembershipGate,
    MembershipProof,
    WhitelistError,
    build_tree,
    from_hex,
    generate_proof,
    load_members,
    to_hex,
)
from merkle_whitelist.membership.config import SUPPORTED_HASHES, SUPPORTED_ODD_POLICIES

NOT_A_MEMBER_EXIT_CODE = 2

hash_option = click.option(
    "--hash",
    "hash_name",
    type=click.Choice(SUPPORTED_HASHES, case_sensitive=False),
    default=None,
    help="Hash function (default: $MERKLE_WHITELIST_HASH or keccak256)",
)
odd_policy_option = click.option(
    "--odd-policy",
    type=click.Choice(SUPPORTED_ODD_POLICIES, case_sensitive=False),
    default=None,
    help="How an unpaired last node is promoted (default: carry)",
)
members_argument = click.argument(
    "members", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)


def _build(members, hash_name, odd_policy):
    try:
        identities = load_members(members)
        return identities, build_tree(identities, hash_name=hash_name, odd_policy=odd_policy)
    except WhitelistError as e:
        raise click.ClickException(str(e)) from e


def _load_proof(path: Path) -> MembershipProof:
    try:
        if path.suffix.lower() == ".json":
            return MembershipProof.from_dict(json.loads(path.read_text(encoding="utf-8")))
        return MembershipProof.deserialize(path.read_bytes())
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{path}: invalid JSON: {e}") from e
    except WhitelistError as e:
        raise click.ClickException(f"{path}: {e}") from e


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def main(verbose):
    """
    merkle-whitelist - Merkle-root membership proofs

    Build a root over a member list, hand out proofs, verify claims.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@main.command()
@members_argument
@hash_option
@odd_policy_option
def root(members, hash_name, odd_policy):
    """
    Print the Merkle root of MEMBERS.

    MEMBERS is a .txt (one per line), .json or .yaml member list. The
    printed value is what gets stored in the on-chain verifier.

    Examples:

        merkle-whitelist root whitelist.txt
    """
    _, tree = _build(members, hash_name, odd_policy)
    click.echo(tree.hex_root)


@main.command()
@members_argument
@click.argument("identity")
@hash_option
@odd_policy_option
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["json", "cbor"], case_sensitive=False),
    default="json",
    help="Proof artifact format (default: json)",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file path (default: stdout, json only)",
)
def proof(members, identity, hash_name, odd_policy, fmt, output):
    """
    Generate the membership proof for IDENTITY.

    Examples:

        merkle-whitelist proof whitelist.txt 0x5B38...ddC4

        merkle-whitelist proof whitelist.txt 0x5B38...ddC4 --format cbor --output a.cbor
    """
    _, tree = _build(members, hash_name, odd_policy)
    try:
        membership_proof = generate_proof(tree, identity)
    except WhitelistError as e:
        raise click.ClickException(str(e)) from e

    if fmt.lower() == "cbor":
        if output is None:
            raise click.UsageError("--output is required for cbor proofs")
        output.write_bytes(membership_proof.serialize())
        click.echo(click.style(f"✓ Proof saved to: {output}", fg="green"), err=True)
        return

    content = json.dumps(membership_proof.to_dict(), indent=2)
    if output is None:
        click.echo(content)
    else:
        output.write_text(content + "\n", encoding="utf-8")
        click.echo(click.style(f"✓ Proof saved to: {output}", fg="green"), err=True)


@main.command()
@click.argument("root_hex", metavar="ROOT")
@click.argument("identity")
@click.argument(
    "proof_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
def verify(root_hex, identity, proof_file):
    """
    Check that IDENTITY is a member of the set committed to by ROOT.

    PROOF_FILE is a .json or CBOR proof from `merkle-whitelist proof`.
    Exits 0 for a member, 2 for a non-member.
    """
    membership_proof = _load_proof(proof_file)
    try:
        gate = MembershipGate(from_hex(root_hex, "root"), hash_name=membership_proof.hash_name)
        is_member = gate.verify_membership(
            identity, membership_proof.siblings, membership_proof.positions
        )
    except WhitelistError as e:
        raise click.ClickException(str(e)) from e

    if is_member:
        click.echo(click.style("✓ Member: proof reproduces the root", fg="green"))
        return
    click.echo(click.style("✗ Not a member: proof does not reproduce the root", fg="red"))
    sys.exit(NOT_A_MEMBER_EXIT_CODE)


@main.command()
@members_argument
@hash_option
@odd_policy_option
def info(members, hash_name, odd_policy):
    """Summarize the tree built over MEMBERS."""
    identities, tree = _build(members, hash_name, odd_policy)

    table = Table(title="Merkle whitelist", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", overflow="fold")
    table.add_row("Members", str(len(identities)))
    table.add_row("Distinct leaves", str(len(set(tree.leaves))))
    table.add_row("Depth", str(tree.depth))
    table.add_row("Hash", tree.hash_name)
    table.add_row("Odd-level policy", tree.odd_policy.value)
    table.add_row("Root", to_hex(tree.root))
    Console().print(table)


@main.command()
def version():
    """Show version information."""
    click.echo(f"merkle-whitelist version {__version__}")


if __name__ == "__main__":
    main()
