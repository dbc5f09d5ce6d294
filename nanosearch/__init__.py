"""
nanosearch - local and remote web search for agents
"""

__version__ = "0.1.0"
__logo__ = "🔎"
