"""pegvault.oracle -- price oracle contract and adapters."""

from pegvault.oracle.price import PriceOracle as PriceOracle
from pegvault.oracle.price import PriceSample as PriceSample
from pegvault.oracle.price import RoundDataFeed as RoundDataFeed
from pegvault.oracle.price import RoundDataOracle as RoundDataOracle
from pegvault.oracle.price import StaticPriceOracle as StaticPriceOracle
from pegvault.oracle.price import invalid_price as invalid_price
