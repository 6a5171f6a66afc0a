"""pegvault.core -- result type, value types, units and errors."""

from pegvault.core.errors import ConservationViolationError as ConservationViolationError
from pegvault.core.errors import LiquidationError as LiquidationError
from pegvault.core.errors import LiquidationErrorKind as LiquidationErrorKind
from pegvault.core.errors import MintError as MintError
from pegvault.core.errors import MintErrorKind as MintErrorKind
from pegvault.core.errors import OracleError as OracleError
from pegvault.core.errors import OracleErrorKind as OracleErrorKind
from pegvault.core.errors import PegVaultError as PegVaultError
from pegvault.core.errors import PersistenceError as PersistenceError
from pegvault.core.errors import RedeemError as RedeemError
from pegvault.core.errors import RedeemErrorKind as RedeemErrorKind
from pegvault.core.errors import ReentrancyError as ReentrancyError
from pegvault.core.result import Err as Err
from pegvault.core.result import Ok as Ok
from pegvault.core.result import Result as Result
from pegvault.core.result import unwrap as unwrap
from pegvault.core.serialization import canonical_bytes as canonical_bytes
from pegvault.core.types import NonEmptyStr as NonEmptyStr
from pegvault.core.types import UtcDatetime as UtcDatetime
from pegvault.core.units import ADDITIONAL_FEED_PRECISION as ADDITIONAL_FEED_PRECISION
from pegvault.core.units import BPS as BPS
from pegvault.core.units import COLLATERAL_DECIMALS as COLLATERAL_DECIMALS
from pegvault.core.units import COLLATERAL_RATIO_DENOMINATOR as COLLATERAL_RATIO_DENOMINATOR
from pegvault.core.units import COLLATERAL_RATIO_NUMERATOR as COLLATERAL_RATIO_NUMERATOR
from pegvault.core.units import FEED_DECIMALS as FEED_DECIMALS
from pegvault.core.units import LIQUIDATION_OWNER_SHARE_NUMERATOR as LIQUIDATION_OWNER_SHARE_NUMERATOR
from pegvault.core.units import LIQUIDATION_SHARE_DENOMINATOR as LIQUIDATION_SHARE_DENOMINATOR
from pegvault.core.units import PEGVAULT_DECIMAL_CONTEXT as PEGVAULT_DECIMAL_CONTEXT
from pegvault.core.units import PRECISION as PRECISION
from pegvault.core.units import STABLE_DECIMALS as STABLE_DECIMALS
from pegvault.core.units import PositiveInt as PositiveInt
from pegvault.core.units import collateral_to_usd as collateral_to_usd
from pegvault.core.units import debt_to_usd as debt_to_usd
from pegvault.core.units import from_decimal as from_decimal
from pegvault.core.units import mintable_debt as mintable_debt
from pegvault.core.units import rescale as rescale
from pegvault.core.units import split_liquidation as split_liquidation
from pegvault.core.units import to_decimal as to_decimal
from pegvault.core.units import usd_to_collateral as usd_to_collateral
