"""
Polymarket Trading Bots

Two polling strategies sharing one API client and one position ledger:

1. COPY TRADING (polybot.strategies.copy_trading)
   - Follows configured addresses through the trade history of active markets
   - Mirrors their taker trades at a capped size with a slippage allowance

2. ARBITRAGE (polybot.strategies.arbitrage)
   - Polls order books of active markets for both outcomes
   - Buys at the ask and sells at the bid when the book is crossed

Entry point: python -m polybot.main (or the ``polybot`` script)

Key Modules:
- polybot.clients: REST and push API clients
- polybot.trading: Order validation, placement and position ledger
- polybot.strategies: Strategy loops and their timer
"""
