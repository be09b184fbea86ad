# Order placement and position tracking
from .ledger import PositionLedger
from .order_gate import OrderGate
from .toolkit import TradingToolkit

__all__ = ["PositionLedger", "OrderGate", "TradingToolkit"]
