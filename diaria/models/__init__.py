"""ORM models."""

from diaria.models.draw import Draw
from diaria.models.markov_edge import MarkovEdge
from diaria.models.number_stat import NumberStat

__all__ = ["Draw", "MarkovEdge", "NumberStat"]
