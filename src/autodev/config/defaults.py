"""Default configuration values."""

# Intent categories, checked in this order (first match wins)
DEFAULT_CATEGORY_KEYWORDS = {
    "create": ["build", "create", "new", "develop", "make"],
    "fix": ["fix", "bug", "error", "issue", "problem", "broken"],
    "optimize": ["optimize", "performance", "speed", "efficient", "fast"],
    "improve": ["improve", "enhance", "better", "upgrade", "refactor"],
    "explore": ["explore", "research", "investigate", "analyze", "study"],
}

DEFAULT_URGENT_KEYWORDS = ["urgent", "asap", "immediately", "critical", "emergency"]
DEFAULT_HIGH_URGENCY_KEYWORDS = ["soon", "important", "priority", "needed"]

DEFAULT_DOMAINS = ["web", "mobile", "api", "database", "ui", "backend", "frontend", "ai", "ml"]

# Scopes, checked in this order
DEFAULT_SCOPE_KEYWORDS = {
    "architecture": ["architecture", "structure", "design", "system"],
    "performance": ["performance", "speed", "optimization", "efficiency"],
    "project": ["project", "application", "system", "platform"],
}

# Environment selection vocabularies
DEFAULT_WEB_INDICATORS = [
    "website",
    "browser",
    "screenshot",
    "web",
    "url",
    "http",
    "form",
    "click",
    "navigate",
    "github",
    "google",
    "search",
    "competitor",
    "market research",
    "social media",
    "visual",
    "ui",
    "interface",
]

DEFAULT_TERMINAL_INDICATORS = [
    "build",
    "compile",
    "test",
    "deploy",
    "git",
    "npm",
    "yarn",
    "docker",
    "script",
    "command",
    "cli",
    "file",
    "directory",
]

# Keywords that mean the request needs the automation backend at all
DEFAULT_WEB_REQUIREMENT_KEYWORDS = [
    "website",
    "browser",
    "url",
    "http",
    "web",
    "screenshot",
    "click",
    "form",
    "github",
    "google",
    "search",
    "login",
    "navigate",
    "scrape",
    "automation",
]

DEFAULT_MARKET_KEYWORDS = [
    "competitor",
    "market",
    "trend",
    "analysis",
    "research",
    "pricing",
    "feedback",
    "review",
    "social",
    "media",
    "news",
]

# Files/directories whose presence means the project has an implementation
DEFAULT_IMPLEMENTATION_INDICATORS = [
    "src",
    "lib",
    "components",
    "pages",
    "index.js",
    "main.ts",
    "app.py",
]

# Command identifiers -> external executables used by the subprocess backend
DEFAULT_COMMAND_MAP = {
    "/constitution": ["specify", "constitution"],
    "/specify": ["specify", "specify"],
    "/plan": ["specify", "plan"],
    "/tasks": ["specify", "tasks"],
    "/implement": ["specify", "implement"],
    "/evolve": ["shinka_launch"],
}

DEFAULT_WATCH_SUFFIXES = [".py", ".js", ".ts"]

DEFAULT_TRACKED_METRICS = [
    "code_quality",
    "performance",
    "user_satisfaction",
    "market_alignment",
    "technical_debt",
    "test_coverage",
    "build_success",
]

DEFAULT_STATE_DIR = ".specify/memory"
DEFAULT_EVOLUTION_INTERVAL_DAYS = 7
DEFAULT_CHECKPOINT_CONFIDENCE_THRESHOLD = 0.7
