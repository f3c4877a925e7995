"""
PT Flow AI text-generation gateway.

Provides:
- An OpenRouter chat-completion client that reports every failure as data
- Feature adapters for clinical drafting (SOAP notes, billing codes, claim
  justifications, exercise plans, patient messages, progress and session
  summaries, treatment plans)
- A FastAPI service exposing one endpoint per adapter, plus a CLI runner
"""

__version__ = "0.1.0"
