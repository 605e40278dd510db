"""Services that derive standings and resolve team references."""

from vbcompetitions.services.resolver import TeamReferenceResolver
from vbcompetitions.services.standings import StandingsCalculator

__all__ = ["TeamReferenceResolver", "StandingsCalculator"]
