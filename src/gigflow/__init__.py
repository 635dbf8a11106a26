"""
GigFlow - Workflow engine for multi-party gig events

Businesses bring materials and contractors, hosts bring the venue and the
tables, contractors staff the event. GigFlow moves each event from
proposal to payout, keeps check-ins working offline and escalates what
goes wrong.

Fun fact: Trade fairs have run on "table rental" since the medieval
Champagne fairs of the 12th century - the paperwork just got faster.
"""

from gigflow.gigflow import GigFlow

__version__ = "0.1.0"
__all__ = ["GigFlow", "__version__"]
