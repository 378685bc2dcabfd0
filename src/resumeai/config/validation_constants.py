"""
Validation Constants for agent inputs and workflow parameters.

These constants define valid values, ranges, and limits used by the typed
parameter models and by the agents' own input validation.
"""

# Glaze level: how much an agent may embellish content (1 = conservative, 5 = maximum)
VALID_GLAZE_LEVEL_RANGE = range(1, 6)  # 1 to 5 inclusive
DEFAULT_GLAZE_LEVEL = 2

# Skills extraction modes
VALID_EXTRACTION_TYPES = {"job-requirements", "resume-skills", "skill-gap-analysis"}

# Resume review depth
VALID_REVIEW_DEPTHS = {"quick", "standard", "comprehensive"}

# ATS keyword density strategy
VALID_KEYWORD_DENSITIES = {"conservative", "moderate", "aggressive"}

# Content item types an optimizer can rewrite
VALID_ITEM_TYPES = {"experience", "project", "skill"}

# Grammar enhancement
VALID_TONES = {"professional", "dynamic", "technical", "creative"}
VALID_LENGTHS = {"shorter", "longer", "same"}
MAX_GRAMMAR_TEXT_LENGTH = 1000

# Job descriptions shorter than this are too thin for tailoring
MIN_JOB_DESCRIPTION_LENGTH = 50
# Source text shorter than this is too thin for skills extraction
MIN_SOURCE_TEXT_LENGTH = 20

# Resume builder selects at least this many experiences + projects combined
MIN_RESUME_SELECTIONS = 3

# Insight synthesis limits
MAX_KEY_RECOMMENDATIONS = 5
MAX_PRIORITY_ACTIONS = 3
