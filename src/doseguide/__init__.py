"""
DoseGuide - protocol-locked Q&A over drug protocol documents.

Questions are answered only from verbatim evidence retrieved from the
protocol bound to a topic. A two-stage pipeline extracts quotes, validates
them, composes an answer restricted to those quotes and re-validates it
before rendering.
"""

__version__ = "0.1.0"
