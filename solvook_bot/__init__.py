"""
Solvook Bot: a Slack bot answering slash commands, mentions, messages,
buttons, shortcuts and modal submissions.
"""

__version__ = "0.1.0"
