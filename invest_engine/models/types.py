"""
Standard type definitions for database models.

Provides consistent types for monetary, rate and JSON fields across all models.
"""

from sqlalchemy import DECIMAL, JSON
from sqlalchemy.dialects.postgresql import JSONB

# Standard money type for principals, profits, volumes and rewards
# Precision: 18 digits total, 8 after decimal point
# Range: up to 9,999,999,999.99999999
MoneyType = DECIMAL(18, 8)

# Fractional rate type (0.070000 = 7%)
# Precision: 10 digits total, 6 after decimal point
RateType = DECIMAL(10, 6)

# Multiplier type for profit caps (5.0000 = 5x)
MultiplierType = DECIMAL(10, 4)

# JSON document type: JSONB on PostgreSQL, plain JSON elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")
