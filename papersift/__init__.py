"""PaperSift - conference paper discovery, keyword search and ranking.

Discovers which conference/year JSON dumps exist under a data root,
normalizes their records into one schema, and ranks them for a set
of search keywords.
"""

__version__ = "1.0.0"

from papersift.config import Settings
from papersift.models.paper import Paper, RankedPaper

__all__ = ["Paper", "RankedPaper", "Settings", "__version__"]
