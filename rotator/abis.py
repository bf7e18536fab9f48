"""Minimal ABIs for the contract functions the rotation invokes.

Only the entries actually called or encoded are listed.
"""

from __future__ import annotations


def _fn(name: str, inputs: list[tuple[str, str]], outputs=(), mutability="nonpayable"):
    return {
        "name": name,
        "type": "function",
        "stateMutability": mutability,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": n, "type": t} for n, t in outputs],
    }


ERC20_ABI = [
    _fn("approve", [("_spender", "address"), ("_value", "uint256")], [("", "bool")]),
    _fn(
        "balanceOf",
        [("_owner", "address")],
        [("balance", "uint256")],
        mutability="view",
    ),
    _fn("decimals", [], [("", "uint8")], mutability="view"),
]

AAVE_POOL_ABI = [
    _fn(
        "supply",
        [
            ("asset", "address"),
            ("amount", "uint256"),
            ("onBehalfOf", "address"),
            ("referralCode", "uint16"),
        ],
    ),
    _fn(
        "withdraw",
        [("asset", "address"), ("amount", "uint256"), ("to", "address")],
        [("amountWithdrawn", "uint256")],
    ),
]

# Silo router: ``multicall`` executes raw call data against the router itself,
# so the inner calls must be encoded with these entries, not the ERC-20 ABI.
SILO_ROUTER_ABI = [
    _fn(
        "multicall",
        [("data", "bytes[]")],
        [("results", "bytes[]")],
        mutability="payable",
    ),
    _fn(
        "transferFrom",
        [("_token", "address"), ("_to", "address"), ("_amount", "uint256")],
        mutability="payable",
    ),
    _fn(
        "approve",
        [("_token", "address"), ("_spender", "address"), ("_amount", "uint256")],
        mutability="payable",
    ),
    _fn(
        "deposit",
        [("_silo", "address"), ("_amount", "uint256"), ("_collateral", "uint8")],
        [("shares", "uint256")],
        mutability="payable",
    ),
]

# Silo vault share token (bUSDC): ERC-20 balance plus collateral-aware redeem.
SILO_VAULT_ABI = [
    _fn(
        "balanceOf",
        [("_owner", "address")],
        [("balance", "uint256")],
        mutability="view",
    ),
    _fn("decimals", [], [("", "uint8")], mutability="view"),
    _fn(
        "redeem",
        [
            ("_shares", "uint256"),
            ("_receiver", "address"),
            ("_owner", "address"),
            ("_collateralType", "uint8"),
        ],
        [("assets", "uint256")],
    ),
]

# Smart account entry points callable directly by its admin (the owner EOA).
SMART_ACCOUNT_ABI = [
    _fn(
        "execute",
        [("_target", "address"), ("_value", "uint256"), ("_calldata", "bytes")],
    ),
    _fn(
        "executeBatch",
        [("_target", "address[]"), ("_value", "uint256[]"), ("_calldata", "bytes[]")],
    ),
]

__all__ = [
    "ERC20_ABI",
    "AAVE_POOL_ABI",
    "SILO_ROUTER_ABI",
    "SILO_VAULT_ABI",
    "SMART_ACCOUNT_ABI",
]
