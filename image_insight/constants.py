"""All magic values live here — no inline literals anywhere else."""

# Vision providers and their default models
PROVIDER_GEMINI = "gemini"
PROVIDER_CLAUDE = "claude"
PROVIDER_OPENAI = "openai"
GEMINI_VISION_MODEL = "gemini-2.5-flash"
CLAUDE_VISION_MODEL = "claude-opus-4-6"
OPENAI_VISION_MODEL = "gpt-4o"
DEFAULT_VISION_MODELS = {
    PROVIDER_GEMINI: GEMINI_VISION_MODEL,
    PROVIDER_CLAUDE: CLAUDE_VISION_MODEL,
    PROVIDER_OPENAI: OPENAI_VISION_MODEL,
}
CLAUDE_MAX_TOKENS = 1024

# Instruction sent with every image
DEFAULT_ANALYSIS_PROMPT = (
    "Identifique tudo que está na imagem, descreva a cena em detalhes e forneça "
    "suas percepções sobre o contexto, atmosfera e possíveis narrativas. "
    "Seja o mais descritivo e perspicaz possível."
)

# Payload encoding
IMAGE_MEDIA_PREFIX = "image/"
DATA_URI_SCHEME = "data:"
DATA_URI_BASE64_MARKER = ";base64"
DEFAULT_MEDIA_TYPE = "application/octet-stream"

# Upload limits (Gemini caps inline request data at 20 MB)
DEFAULT_MAX_UPLOAD_MB = 20
BYTES_PER_MB = 1024 * 1024

# Web surface
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
APP_TITLE = "Image Insight"
APP_VERSION = "0.1.0"
SESSION_COOKIE = "image_insight_session"
MAX_SESSIONS = 1000

# Log messages
MSG_SERVER_STARTING = "Starting image analysis server on %s:%d (%s / %s)"
MSG_CONFIG_INVALID = "Configuration error: %s"
MSG_ANALYSIS_START = "→ %s (%s, %d bytes)"
MSG_ANALYSIS_OK = "✓ Analysis complete (%.1fs, %d chars)"
MSG_ANALYSIS_REMOTE_FAIL = "✗ Remote analysis failed (%.1fs)"
MSG_STALE_RESULT = "Discarding stale result of cycle %d (current: %d)"
MSG_STALE_SELECT = "Discarding superseded file selection %d (current: %d)"
MSG_CYCLE_BUSY = "Analyze ignored: cycle %d still outstanding"
MSG_SESSION_EVICTED = "Evicted session %s"

# User-facing messages
MSG_NOT_AN_IMAGE = "Please select a valid image file (got %r)."
MSG_NO_FILE_SELECTED = "Please select an image first."
MSG_FILE_TOO_LARGE = "Image is too large (%d bytes, limit %d)."
MSG_EMPTY_INSTRUCTION = "Instruction text must not be empty."
MSG_BAD_DATA_URI = "Image data is not a valid base64 data URI."
MSG_READ_FAILED = "Could not read the image file: %s"
MSG_ANALYSIS_ERROR = "Error analyzing image: %s"
MSG_REMOTE_AUTH = "authentication failed (%d)"
MSG_REMOTE_RATE_LIMIT = "rate limit exceeded (%d)"
MSG_REMOTE_STATUS = "service returned %d"
MSG_CYCLE_IN_PROGRESS = "An analysis is already in progress."

# Credential variable names per provider (for configuration errors)
API_KEY_ENV_NAMES = {
    PROVIDER_GEMINI: "GEMINI_API_KEY (or API_KEY)",
    PROVIDER_CLAUDE: "ANTHROPIC_API_KEY",
    PROVIDER_OPENAI: "OPENAI_API_KEY",
}
MSG_REMOTE_NO_CHOICES = "response contained no choices"
