"""
Shared constants for the profitability privacy models.

This module defines constants used across components for consistency in
float comparisons, default game parameters, quality metadata labels and the
field layout of the bundled census reference tables.
"""

import math

# Used to determine equality of floats
MAXIMUM_PRECISION_DIGITS: int = 8
EPSILON: float = math.pow(10, -MAXIMUM_PRECISION_DIGITS)

# Default parameters of the Stackelberg game, as used in the benchmarks of
# Wan et al. 2015
DEFAULT_ADVERSARY_COST: float = 4.0
DEFAULT_ADVERSARY_GAIN: float = 300.0
DEFAULT_PUBLISHER_LOSS: float = 300.0
DEFAULT_PUBLISHER_BENEFIT: float = 1200.0

# Treat generalization and suppression equally
DEFAULT_GS_FACTOR: float = 0.5

# Labels of the metadata attached to aggregate payout scores
PUBLISHER_PAYOUT: str = "Publisher payout"
MAXIMAL_PAYOUT: str = "Theoretical maximum"

# Delimiter of the population reference tables
POPULATION_TABLE_DELIMITER: str = ";"

# Records are ordered (sex, zip, age, race); the census 2010 tables are stored
# as (race, sex, age, zip). Entry d names the record field feeding table dimension d.
CENSUS_2010_RECORD_FIELDS: tuple[str, ...] = ("sex", "zip", "age", "race")
CENSUS_2010_TABLE_DIMENSIONS: tuple[str, ...] = ("race", "sex", "age", "zip")
CENSUS_2010_FIELD_ORDER: tuple[int, ...] = tuple(
    CENSUS_2010_RECORD_FIELDS.index(dimension) for dimension in CENSUS_2010_TABLE_DIMENSIONS
)
