"""
SOC Occupation Matcher — Production Package
============================================
Hexagonal (Ports & Adapters) architecture.

Layer map
─────────────────────────────────────────────────────
  config/       All tuneable settings & prompt strings
  domain/       Pure business objects (models, exceptions) — no I/O
  ports/        Abstract interfaces (Python Protocols)
  adapters/     Concrete implementations of each Port (JSON file, OpenAI…)
  services/     Tokenizer, index, matcher, orchestration; depend only on Ports
  interfaces/   Delivery layer: CLI
  tests/        Full test suite: unit / e2e

Swapping any external dependency (taxonomy source, LLM ranker):
  1. Write a new adapter in adapters/ implementing the relevant Port
  2. Change the single wiring line in services/container.py
  3. Done — zero other files touched
"""
__version__ = "1.0.0"
