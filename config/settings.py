"""
Configuration settings for Manga Panel Studio
"""
import os
from dotenv import load_dotenv

load_dotenv()

# API Keys
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")

# OpenAI settings
OPENAI_API_BASE = os.getenv("OPENAI_API_BASE", "https://api.openai.com/v1")
VISION_MODEL = os.getenv("VISION_MODEL", "gpt-4o")
VISION_MAX_TOKENS = 4000
IMAGE_MODEL = os.getenv("IMAGE_MODEL", "dall-e-3")
IMAGE_SIZE = "1024x1024"
IMAGE_QUALITY = "hd"
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "120"))

# Playback settings
PLAYBACK_INTERVAL = 2.0  # seconds per panel

# Gateway proxy server
SERVER_HOST = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT = int(os.getenv("SERVER_PORT", "8000"))
GATEWAY_PATH = "/process-manga-panel"

# Where clients reach the proxy
GATEWAY_URL = os.getenv("GATEWAY_URL", f"http://localhost:{SERVER_PORT}{GATEWAY_PATH}")
GATEWAY_API_KEY = os.getenv("GATEWAY_API_KEY", "")

# CORS
CORS_ALLOW_ORIGIN = "*"
CORS_ALLOW_HEADERS = "authorization, x-client-info, apikey, content-type"

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
