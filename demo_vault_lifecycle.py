"""
demo_vault_lifecycle.py -- A walkthrough of PegVault's collateralized-debt ledger.

This file runs one position through its whole life at a host-pushed ETH/USD
rate, printing the ledger after every step:

  1. Wiring: oracle, position store, custody, event bus, Vault
  2. Alice locks 0.0625 ETH at $2,000 and is issued 100 PUSD
  3. Alice redeems 40 PUSD and gets back the collateral it is worth
  4. ETH drops to $1,500: the position is now below 125%
  5. Bob liquidates it: 75% of the collateral to the owner, 25% to Bob
  6. Every rejection along the way leaves the ledger untouched

All amounts are integers in smallest units (wei, 18-decimal PUSD). Decimals
appear only when printing.

Run this:  .venv/bin/python demo_vault_lifecycle.py
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from decimal import Decimal

from pegvault.core.result import Err, Ok, unwrap
from pegvault.core.types import NonEmptyStr, UtcDatetime
from pegvault.core.units import COLLATERAL_DECIMALS, STABLE_DECIMALS, from_decimal, to_decimal
from pegvault.infra.config import VaultConfig
from pegvault.infra.memory_adapter import InMemoryEventBus, InMemoryPositionStore
from pegvault.ledger.custody import CustodyEngine
from pegvault.ledger.health import collateral_ratio_bps
from pegvault.ledger.transactions import Account, AccountType, Move, Transaction
from pegvault.oracle.price import PriceSample, StaticPriceOracle
from pegvault.vault import Vault

logging.basicConfig(level=logging.INFO, format="  [%(levelname)s] %(name)s: %(message)s")

ETH = 10**18


def sep(title: str) -> None:
    """Print a section separator."""
    print(f"\n{'=' * 72}")
    print(f"  {title}")
    print(f"{'=' * 72}\n")


def eth(wei: int) -> str:
    return f"{to_decimal(wei, COLLATERAL_DECIMALS).normalize()} ETH"


def pusd(amount: int) -> str:
    return f"{to_decimal(amount, STABLE_DECIMALS).normalize()} {config.stable_unit}"


# =========================================================================
# STEP 1: Wiring
# =========================================================================

sep("STEP 1: Wiring the vault")

# The vault owns no state of its own. Positions live in a PositionStore,
# collateral lives in a custody engine, notifications go to an EventBus and
# the price comes from a PriceOracle sampled once per operation.

config = VaultConfig(owner="treasury")
oracle = StaticPriceOracle(2_000 * 10**8)  # $2,000.00000000 per ETH
store = InMemoryPositionStore()
custody = CustodyEngine()
bus = InMemoryEventBus()

for name, kind in (
    ("FAUCET", AccountType.EXTERNAL),
    (config.vault_account, AccountType.VAULT),
    ("treasury", AccountType.WALLET),
    ("alice", AccountType.WALLET),
    ("bob", AccountType.WALLET),
):
    unwrap(custody.register_account(Account(account_id=NonEmptyStr(value=name), account_type=kind)))

# Fund the wallets from the outside world in one atomic transaction.
funding = unwrap(Transaction.create(
    "funding",
    (
        unwrap(Move.create("FAUCET", "alice", "ETH", 10 * ETH)),
        unwrap(Move.create("FAUCET", "bob", "ETH", 10 * ETH)),
    ),
    UtcDatetime(value=datetime(2025, 6, 15, 12, 0, tzinfo=UTC)),
))
unwrap(custody.execute(funding))

vault = Vault(config, oracle, store, custody, bus)

print(f"  Owner account:      {config.owner}")
print(f"  Vault account:      {config.vault_account}")
print(f"  Alice wallet:       {eth(custody.get_balance('alice', 'ETH'))}")
print(f"  Bob wallet:         {eth(custody.get_balance('bob', 'ETH'))}")
print(f"  sigma(ETH):         {custody.total_supply('ETH')}  (the faucet is negative)")


def show_position(account: str) -> None:
    position = unwrap(vault.position(account))
    ratio = collateral_ratio_bps(position, PriceSample(rate=oracle.rate, valid_at=0))
    print(f"  {account}: {eth(position.collateral_amount)} backing {pusd(position.minted_debt)}")
    if ratio is not None:
        print(f"    ratio at ${oracle.rate // 10**8}: {ratio / 100:.2f}%")
    print(f"  mint headroom:      {pusd(unwrap(vault.mint_headroom(account)))}")
    print(f"  total issued:       {pusd(unwrap(vault.totals()).total_issued)}")


# =========================================================================
# STEP 2: Mint
# =========================================================================

sep("STEP 2: Alice mints against 0.0625 ETH")

# 0.0625 ETH * $2,000 = $125.  At the fixed 125% ratio, $125 of collateral
# backs exactly $100 of debt.

deposit = unwrap(from_decimal(Decimal("0.0625"), COLLATERAL_DECIMALS))

match vault.mint("alice", deposit):
    case Ok(mint_receipt):
        print(f"  Deposited:          {eth(mint_receipt.collateral_deposited)}")
        print(f"  Minted:             {pusd(mint_receipt.debt_minted)}")
        print(f"  Custody tx:         {mint_receipt.tx_id}")
    case Err(e):
        print(f"  ERROR: {e.message}")
        raise SystemExit(1)

show_position("alice")

# =========================================================================
# STEP 3: Partial redeem
# =========================================================================

sep("STEP 3: Alice redeems 40 PUSD")

# 40 PUSD is backed by $50 of collateral, which at $2,000 is 0.025 ETH.
# Health is checked on the position AFTER the change: 0.0375 ETH against
# 60 PUSD is still exactly 125%.

match vault.redeem("alice", 40 * ETH):
    case Ok(redeem_receipt):
        print(f"  Retired:            {pusd(redeem_receipt.debt_retired)}")
        print(f"  Released:           {eth(redeem_receipt.collateral_released)}")
    case Err(e):
        print(f"  ERROR: {e.message}")

show_position("alice")

# =========================================================================
# STEP 4: Price drop
# =========================================================================

sep("STEP 4: ETH drops to $1,500")

oracle.set_rate(1_500 * 10**8)
show_position("alice")
print(f"  Liquidation candidates: {unwrap(vault.unhealthy_accounts())}")

# A redeem now fails: the thinner position would be even less healthy.
match vault.redeem("alice", 10 * ETH):
    case Err(e):
        print(f"  Redeem refused:     {e.code}")
    case Ok(_):
        print("  unexpected success")

# =========================================================================
# STEP 5: Liquidation
# =========================================================================

sep("STEP 5: Bob liquidates Alice")

match vault.liquidate("bob", "alice"):
    case Ok(liq_receipt):
        print(f"  Seized:             {eth(liq_receipt.collateral_seized)}")
        print(f"  Debt cleared:       {pusd(liq_receipt.debt_cleared)}")
        print(f"  To {liq_receipt.owner}:        {eth(liq_receipt.owner_share)}  (75%)")
        print(f"  To {liq_receipt.liquidator}:             {eth(liq_receipt.liquidator_share)}  (25%)")
    case Err(e):
        print(f"  ERROR: {e.message}")

show_position("alice")

# =========================================================================
# STEP 6: Rejections
# =========================================================================

sep("STEP 6: Rejections change nothing")

before = (unwrap(vault.positions()), unwrap(vault.totals()), custody.transaction_count())

for label, result in (
    ("mint 0 wei", vault.mint("bob", 0)),
    ("liquidate healthy", vault.liquidate("alice", "bob")),
    ("redeem without debt", vault.redeem("bob", ETH)),
):
    match result:
        case Err(e):
            print(f"  {label:22s} -> {e.code}")
        case Ok(_):
            print(f"  {label:22s} -> unexpected success")

after = (unwrap(vault.positions()), unwrap(vault.totals()), custody.transaction_count())
print(f"  Ledger unchanged:   {before == after}")

# =========================================================================
# SUMMARY
# =========================================================================

sep("SUMMARY")

print("  Notifications published")
for key, value in bus.get_messages(config.events_topic):
    print(f"    {key:8s} {value.decode()}")
print()
print(f"  sigma(ETH):         {custody.total_supply('ETH')}")
print(f"  Vault holds:        {eth(custody.get_balance(config.vault_account, 'ETH'))}")
print(f"  Treasury holds:     {eth(custody.get_balance('treasury', 'ETH'))}")
print()
print("Done. Every step above either committed completely or changed nothing.")
