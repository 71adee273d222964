"""Global constants for sabaccui-cli"""

from enum import Enum

APP_NAME = "sabaccui"
LOG_FORMAT = "%(message)s"

# Project identification
PROJECT_CONFIG_FILE = "sabaccui.config.json"
PROJECT_CONFIG_INDENT = 2
DEFAULT_PROJECT_VERSION = "1.0.0"
MANIFEST_FILE = "manifest.json"
PACKAGE_JSON_FILE = "package.json"
ENV_FILE = ".env"
ENV_EXAMPLE_FILE = ".env.example"

# Placeholders substituted during project setup
SPACE_PLACEHOLDER = "<space>"
CERT_PLACEHOLDER = "<localhost.crt>"
KEY_PLACEHOLDER = "<localhost.key>"
CERT_FILE = "localhost.crt"
KEY_FILE = "localhost.key"
STORYBLOK_TOKEN_ENV_KEY = "NUXT_STORYBLOK_ACCESS_TOKEN"

# Sibling suffix for incoming files that collide with local customizations
DEFAULT_SIBLING_MARKER = ".default"

# Temporary staging prefixes
TEMPLATE_STAGING_PREFIX = "template-"
COMPONENT_STAGING_PREFIX = "component-"

# Remote endpoints
DEFAULT_API_URL = "https://ui.sabaccui.com"
DEFAULT_STORYBLOK_API_URL = "https://mapi.storyblok.com/v1/"
CATALOG_HOST = "sabaccui.com"
STORYBLOK_HOST = "sabaccui.storyblok.com"
PRICING_URL = "https://www.sabaccui.com/pricing"
STORYBLOK_TOKEN_URL = "https://app.storyblok.com/#/me/spaces/{space}/settings?tab=api"
DEFAULT_HTTP_TIMEOUT = 60.0

# User level configuration
USER_CONFIG_DIR = ".sabaccui"
USER_CONFIG_FILE = "config.yaml"

# Tag catalog: legacy source tag id -> canonical tag name
DEFAULT_TAG_CATALOG = {
    "47877": "Molecule",
    "47874": "Atom",
    "47875": "Text",
    "47878": "Organism",
    "50625": "Menu",
}
TAG_OBJECT_TYPE = "component"
TAG_ID_LIST_KEYS = ("component_tag_whitelist", "internal_tag_ids")
TAG_OBJECT_LIST_KEYS = ("internal_tags_list",)


class PackageManager(Enum):
    NPM = "npm"
    YARN = "yarn"
    BUN = "bun"


# Lockfile marker -> package manager, checked in order
LOCKFILE_MARKERS = [
    ("yarn.lock", PackageManager.YARN),
    ("bun.lockb", PackageManager.BUN),
    ("bun.lock", PackageManager.BUN),
]
DEFAULT_PACKAGE_MANAGER = PackageManager.NPM


class ArtifactKind(Enum):
    TEMPLATE = "templates"
    COMPONENT = "components"
    BLOK = "bloks"

    @property
    def label(self) -> str:
        return {
            ArtifactKind.TEMPLATE: "Template",
            ArtifactKind.COMPONENT: "Component",
            ArtifactKind.BLOK: "Blok",
        }[self]


# Error codes
class ErrorCode:
    AUTH_REQUIRED = "SU001"
    ACCESS_DENIED = "SU002"
    NOT_FOUND = "SU003"
    VALIDATION_FAILED = "SU004"
    MANIFEST_MISSING = "SU005"
    MANIFEST_INVALID = "SU006"
    MISSING_SPACE = "SU007"
    SOURCE_CLONE_FAILED = "SU008"
    PUSH_FAILED = "SU009"
    DEPENDENCY_INSTALL_FAILED = "SU010"
    MIGRATION_FAILED = "SU011"
    API_ERROR = "SU012"
    CONFIG_ERROR = "SU013"
    INVALID_INPUT = "SU014"
    TEMPLATE_STEP_FAILED = "SU015"


# Environment variables
ENV_API_URL = "SABACCUI_API_URL"
ENV_LOGIN = "SABACCUI_LOGIN"
ENV_TOKEN = "SABACCUI_TOKEN"
ENV_CONFIG_PATH = "SABACCUI_CONFIG"
ENV_TAG_CATALOG = "SABACCUI_TAG_CATALOG"
ENV_LOG_LEVEL = "SABACCUI_LOG_LEVEL"
ENV_STORYBLOK_API_URL = "STORYBLOK_API_DOMAIN"
ENV_STORYBLOK_TOKEN = "STORYBLOK_OAUTH_TOKEN"
ENV_NETRC = "NETRC"

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
EMOJI_INFO = "ℹ"
EMOJI_PACKAGE = "📦"
EMOJI_ROCKET = "🚀"
EMOJI_FOLDER = "📁"
EMOJI_TOOLS = "🛠"
EMOJI_BROOM = "🧹"
EMOJI_PUZZLE = "🧩"

# Message templates
MSG_NOT_FOUND = "{kind} with key \"{key}\" not found."
MSG_MISSING_SPACE = "No space provided. Check your config file or provide a space id."
