"""Constants used in business logic."""

# Response returned for an empty query, before any other processing happens
GREETING_RESPONSE = "How can I help you today?"

# Store backend types
STORE_TYPE_MEMORY = "memory"
STORE_TYPE_SQLITE = "sqlite"
STORE_TYPE_POSTGRES = "postgres"

# Response cache defaults: a response is cached once the same fingerprint was
# seen this many times, and the cached payload lives for this many seconds
DEFAULT_CACHE_ADMISSION_THRESHOLD = 3
DEFAULT_CACHE_TTL = 60 * 60 * 24

# Sentinel returned by decrement_threshold() for an unknown fingerprint
CACHE_THRESHOLD_NOT_FOUND = -1

# Chat agent types
AGENT_TYPE_OPEN_ENDED = "open-ended"
AGENT_TYPE_CLOSE_ENDED = "close-ended"
AGENT_TYPE_RAG = "rag"

# Output kinds understood by endpoints and the response cache
OUTPUT_KIND_TEXT = "text"
OUTPUT_KIND_JSON = "json"
OUTPUT_KIND_MEDIA = "media"

# Message roles stored in chat history
ROLE_SYSTEM = "system"
ROLE_USER = "user"
ROLE_MODEL = "model"

# Credential status values
CREDENTIAL_STATUS_ACTIVE = "active"
CREDENTIAL_STATUS_DISABLED = "disabled"

# Allow-list sentinel granting a credential access to every endpoint
ALL_ENDPOINTS = "all"

# Number of random bytes used for conversation ids (256 bits)
CHAT_ID_BYTES = 32

# Retriever types
RETRIEVER_TYPE_VECTOR_IO = "vector_io"
RETRIEVER_TYPE_FILE = "file"
DEFAULT_RETRIEVER_MAX_CHUNKS = 5

# PostgreSQL connection constants
# See: https://www.postgresql.org/docs/current/libpq-connect.html#LIBPQ-CONNECT-SSLMODE
POSTGRES_DEFAULT_SSL_MODE = "prefer"
# See: https://www.postgresql.org/docs/current/libpq-connect.html#LIBPQ-CONNECT-GSSENCMODE
POSTGRES_DEFAULT_GSS_ENCMODE = "prefer"

# Environment variable used to hand the configuration path over to workers
CONFIG_PATH_ENV_VAR = "CHAT_ENDPOINT_STACK_CONFIG_PATH"
