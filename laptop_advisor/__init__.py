"""
Laptop Advisor: laptop scoring, price analysis and recommendation engine

Modules:
- common: Settings, logging and shared data contracts
- database: SQLite storage for products, specs, daily prices and LLM cache
- analysis: Usage scores, game FPS estimates, price analysis, should-buy verdict
- recommend: Budget/usage/priority recommendation ranking
- llm: Narrative generation with provider fallback and TTL cache
- advisor: Orchestration service and CLI
"""

__version__ = "0.1.0"
