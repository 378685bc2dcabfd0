# ---------- SETTINGS ----------

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# The model used for every agent call
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
# Checked lazily when the client is first built, so imports work without a key
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")

# Per-agent retry policy (attempts in total, not retries)
AGENT_MAX_ATTEMPTS = int(os.getenv("AGENT_MAX_ATTEMPTS", "3"))
# First backoff delay in seconds, doubled for each further retry
AGENT_RETRY_BASE_DELAY = float(os.getenv("AGENT_RETRY_BASE_DELAY", "1.0"))

# Single deadline for a whole workflow execution
WORKFLOW_TIMEOUT_SECONDS = float(os.getenv("WORKFLOW_TIMEOUT_SECONDS", "180"))

# Generation defaults
DEFAULT_TEMPERATURE = float(os.getenv("DEFAULT_TEMPERATURE", "0.3"))
DEFAULT_MAX_TOKENS = int(os.getenv("DEFAULT_MAX_TOKENS", "4096"))

# Optimization provenance older than this is considered stale
OPTIMIZATION_MAX_AGE_HOURS = int(os.getenv("OPTIMIZATION_MAX_AGE_HOURS", "24"))

# Production frontend origin for CORS (optional)
FRONTEND_URL = os.getenv("FRONTEND_URL", "")
