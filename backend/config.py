"""Configuration management for the Estate Assistant chat widget."""
import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Logging Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # "text" or "json"

# Assistant Configuration
ASSISTANT_NAME = os.getenv("ASSISTANT_NAME", "AI Real Estate Assistant")
REPLY_DELAY_SECONDS = float(os.getenv("REPLY_DELAY_SECONDS", "1.5"))

# Seed for the fallback response RNG; unset means OS entropy
_fallback_seed = os.getenv("FALLBACK_SEED")
FALLBACK_SEED = int(_fallback_seed) if _fallback_seed else None

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
