"""Per-entity field weights for weighted-max scoring.

An entity's score is ``max(weight * field_score)`` over its fields, never a
sum.
"""

# Articles
POST_TITLE_WEIGHT = 1.0
POST_EXCERPT_WEIGHT = 0.7
POST_TAG_WEIGHT = 0.5

# Tags
TAG_NAME_WEIGHT = 1.0
TAG_DESCRIPTION_WEIGHT = 0.7

# Projects
PROJECT_TITLE_WEIGHT = 1.0
PROJECT_DESCRIPTION_WEIGHT = 0.7
PROJECT_TECH_WEIGHT = 0.5
