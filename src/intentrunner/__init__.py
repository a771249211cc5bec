"""Intent Runner - command dispatch and routine execution.

Turns recognized commands into registered intent invocations, remembers
what ran, and lets users bind nicknames to a past command or to a recorded
sequence of commands. Named sequences replay as routines that can pause
and resume across restarts.

Usage:
    intentrunner list                 # List registered intents
    intentrunner nicknames            # List saved nicknames
    intentrunner invoke "morning"     # Replay a nickname
    intentrunner continue             # Resume the paused routine
"""

__version__ = "0.1.0"
