"""Command handling."""

from newsbot.agent.decision import make_trading_decision
from newsbot.agent.loop import Command, CommandLoop, parse_command

__all__ = ["CommandLoop", "Command", "parse_command", "make_trading_decision"]
