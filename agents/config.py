"""
RiskRadar configuration, read from the environment (and a local .env file)
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
MODEL_NAME = os.getenv("RISK_RADAR_MODEL", "gpt-4o-mini")
TEMPERATURE = float(os.getenv("RISK_RADAR_TEMPERATURE", "0.1"))

# When set, insights are requested from this HTTP endpoint instead of OpenAI
ORACLE_URL = os.getenv("RISK_RADAR_ORACLE_URL")
HTTP_TIMEOUT = float(os.getenv("RISK_RADAR_HTTP_TIMEOUT", "60"))

STATE_FILE = os.getenv("RISK_RADAR_STATE_FILE", ".risk_radar_state.json")
