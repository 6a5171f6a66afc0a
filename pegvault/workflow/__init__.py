"""pegvault.workflow -- Temporal.io activities hosting the vault."""

from pegvault.workflow.types import (
    LiquidationInput as LiquidationInput,
)
from pegvault.workflow.types import (
    LiquidationOutput as LiquidationOutput,
)
from pegvault.workflow.types import (
    MintInput as MintInput,
)
from pegvault.workflow.types import (
    MintOutput as MintOutput,
)
from pegvault.workflow.types import (
    OperationFailure as OperationFailure,
)
from pegvault.workflow.types import (
    PositionOutput as PositionOutput,
)
from pegvault.workflow.types import (
    PositionQuery as PositionQuery,
)
from pegvault.workflow.types import (
    RedeemInput as RedeemInput,
)
from pegvault.workflow.types import (
    RedeemOutput as RedeemOutput,
)
