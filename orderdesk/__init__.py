"""
OrderDesk: supplier ordering tool.

Product catalog with day-of-week suggested quantities, order submission,
user approval and scheduled order reminders.
"""

__version__ = "0.1.0"
