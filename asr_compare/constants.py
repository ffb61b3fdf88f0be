"""All magic values live here — no inline literals anywhere else."""

# Configuration defaults
DEFAULT_API_ENDPOINT = "http://127.0.0.1:8000"
DEFAULT_TIMEOUT_SECONDS = "30"
DEFAULT_LOG_LEVEL = "INFO"

# Wire paths on every http backend
PATH_TRANSCRIBE_UPLOAD = "/transcribe/upload"
PATH_HEALTH = "/health"
PATH_MODELS = "/models"

# Multipart field carrying the audio
UPLOAD_FIELD = "file"
DEFAULT_MEDIA_TYPE = "application/octet-stream"

# Form fields sent alongside recorded (not uploaded) audio
FIELD_RECORDED_SECONDS = "seconds"
FIELD_SAMPLE_RATE = "sample_rate"

# Backend kinds
KIND_HTTP = "http"
KIND_OPENAI = "openai"

# OpenAI Whisper backend (enabled when OPENAI_API_KEY is set)
WHISPER_MODEL = "whisper-1"
WHISPER_BACKEND_KEY = "openai_whisper"
WHISPER_BACKEND_LABEL = "OpenAI Whisper"
WHISPER_DEFAULT_LANGUAGE = "en"
OPENAI_BASE_URL = "https://api.openai.com/v1"

# Error bodies are truncated to this many characters in messages
ERROR_BODY_LIMIT = 200

# Language vocabularies
ISO_LANGUAGES = ("en", "vi", "hi", "fr", "de", "es", "zh")
SCRIPT_LANGUAGES = (
    "eng_Latn",
    "vie_Latn",
    "hin_Deva",
    "fra_Latn",
    "deu_Latn",
    "spa_Latn",
    "cmn_Hans",
)

# key -> (label, supports translation, vocabulary, default language)
DEFAULT_BACKENDS = (
    ("whisper_jax", "Whisper JAX", True, ISO_LANGUAGES, "en"),
    ("omni_lingual", "OmniLingual", False, SCRIPT_LANGUAGES, "eng_Latn"),
    ("chunkformer", "Chunkformer", True, ISO_LANGUAGES, "vi"),
    ("qwen3", "Qwen3", True, SCRIPT_LANGUAGES, "eng_Latn"),
    ("qwen3_1_7B", "Qwen3 1.7B", True, SCRIPT_LANGUAGES, "eng_Latn"),
    ("qwen3_0_6B", "Qwen3 0.6B", True, SCRIPT_LANGUAGES, "eng_Latn"),
)

# Log messages
MSG_STARTING = "asr-compare starting…"
MSG_REGISTRY_LOADED = "Loaded %d backends from %s"
MSG_TASK_DOWNGRADED = "%s does not support translation — transcribing instead"
MSG_LANGUAGE_CLEARED = "%s does not know language %r — using auto-detect"
MSG_LEG_START = "→ %s"
MSG_LEG_OK = "✓ %s (%.2fs)"
MSG_LEG_FAIL = "✗ %s (%.2fs): %s"
MSG_LEG_CRASHED = "Leg %s crashed outside its error channel"
MSG_LEG_CANCELED = "Leg canceled"
MSG_DISPATCH_CANCELED = "Dispatch canceled — stopping %d outstanding legs"
MSG_HEALTH_FAILED = "Health check failed for %s: %s"

# Error messages carried by ErrorDescriptor
MSG_ERR_NOT_FOUND = "Unknown backend: %s"
MSG_ERR_TIMEOUT = "No response within %.1fs"
MSG_ERR_TRANSPORT = "Transport error: %s"
MSG_ERR_STATUS = "HTTP %d: %s"
MSG_ERR_BAD_BODY = "Unparsable response body: %s"
MSG_ERR_INTERNAL = "Unexpected error: %s"
MSG_ERR_EMPTY = "Cannot summarize zero outcomes"

# User-facing CLI messages
MSG_TRANSCRIPTION_FAILED = "Transcription failed: %s"
MSG_NO_TEXT = "No transcription text"
MSG_SUMMARY = "Successful: %d / %d   Fastest: %s (%.2fs)   Slowest: %s (%.2fs)"
MSG_HEALTH_OK = "healthy"
MSG_HEALTH_DOWN = "unreachable"
MSG_SERVER_MODELS = "%s: %s (default: %s, loaded: %s)"
MSG_SERVER_MODELS_FAILED = "%s: %s — %s"
