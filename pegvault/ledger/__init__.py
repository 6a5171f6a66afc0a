"""pegvault.ledger -- positions, health rule, operation planning and custody."""

from pegvault.ledger.custody import CustodyEngine as CustodyEngine
from pegvault.ledger.events import LiquidationReceipt as LiquidationReceipt
from pegvault.ledger.events import Liquidated as Liquidated
from pegvault.ledger.events import MintReceipt as MintReceipt
from pegvault.ledger.events import Minted as Minted
from pegvault.ledger.events import Notification as Notification
from pegvault.ledger.events import RedeemReceipt as RedeemReceipt
from pegvault.ledger.events import Redeemed as Redeemed
from pegvault.ledger.events import notification_for as notification_for
from pegvault.ledger.events import notification_key as notification_key
from pegvault.ledger.health import collateral_ratio_bps as collateral_ratio_bps
from pegvault.ledger.health import is_healthy as is_healthy
from pegvault.ledger.health import max_mintable as max_mintable
from pegvault.ledger.operations import LiquidationPlan as LiquidationPlan
from pegvault.ledger.operations import MintPlan as MintPlan
from pegvault.ledger.operations import RedeemPlan as RedeemPlan
from pegvault.ledger.operations import plan_liquidation as plan_liquidation
from pegvault.ledger.operations import plan_mint as plan_mint
from pegvault.ledger.operations import plan_redeem as plan_redeem
from pegvault.ledger.position import CollateralPosition as CollateralPosition
from pegvault.ledger.position import LedgerTotals as LedgerTotals
from pegvault.ledger.store import LedgerScope as LedgerScope
from pegvault.ledger.store import PositionLedger as PositionLedger
from pegvault.ledger.transactions import Account as Account
from pegvault.ledger.transactions import AccountType as AccountType
from pegvault.ledger.transactions import ExecuteResult as ExecuteResult
from pegvault.ledger.transactions import Move as Move
from pegvault.ledger.transactions import Transaction as Transaction
