"""Data records passed between the renderer, assembler and controller."""

from datetime import datetime
from typing import Literal, NotRequired, TypedDict

AppType = Literal["web-app", "mobile-app", "saas-tool", "chrome-extension", "ai-app"]
Platform = Literal["android", "ios", "web", "cross-platform"]
Theme = Literal["dark", "light"]
DesignStyle = Literal["minimal", "playful", "business"]
Complexity = Literal["simple", "medium", "complex"]
Stage = Literal["setup", "framework", "page", "linking", "complete"]
EntryType = Literal["framework", "page", "linking"]

APP_TYPES = {"web-app", "mobile-app", "saas-tool", "chrome-extension", "ai-app"}
PLATFORMS = {"android", "ios", "web", "cross-platform"}
THEMES = {"dark", "light"}
DESIGN_STYLES = {"minimal", "playful", "business"}


class WizardInput(TypedDict):
    app_name: str
    app_type: AppType
    platforms: list[Platform]  # Non-empty, no duplicates.
    theme: Theme
    design_style: DesignStyle
    target_audience: NotRequired[str]  # Omitted from prompts when absent or blank.
    key_features: list[str]
    description: str  # Free-form vision text.
    complexity: Complexity  # Derived from len(key_features).


class PageSpec(TypedDict):
    name: str
    purpose: str
    components: list[str]
    layout: str
    priority: NotRequired[Literal["high", "medium", "low"]]
    user_actions: NotRequired[list[str]]
    data_requirements: NotRequired[list[str]]


class ToolDescriptor(TypedDict):
    name: str
    url: str
    reasons: list[str]
    estimated_time: NotRequired[str]
    suitability_score: NotRequired[int]


class EnhancementConfig(TypedDict):
    color_scheme: Literal["vibrant", "pastel", "monochrome", "default"]
    animation: Literal["none", "subtle", "dynamic", "playful"]
    spacing: Literal["compact", "comfortable", "spacious"]
    typography: Literal["modern", "classic", "playful", "technical"]


class PagePrompt(TypedDict):
    page_name: str
    components: list[str]
    layout: str
    prompt: str  # Generic text. Never rewritten after assembly.
    builder_specific: dict[str, str]  # Lower-cased builder id -> text.
    generated: bool


class PromptBundle(TypedDict):
    app_name: str
    framework_prompt: str
    page_prompts: list[PagePrompt]
    linking_prompt: str
    builder_tools: list[ToolDescriptor]
    complexity: Complexity
    # Kept for the linking display text; same objects the prompts were rendered from.
    pages: list[PageSpec]
    wizard_input: WizardInput


class Completion(TypedDict):
    framework: bool
    pages: list[bool]  # len == len(page_prompts)
    linking: bool


class StageState(TypedDict):
    stage: Stage
    current_page_index: int  # Only meaningful when stage == "page".
    completed: Completion
    framework_shown: bool


class HistoryEntry(TypedDict):
    type: EntryType
    title: str
    prompt: str
    timestamp: datetime
    page_index: NotRequired[int]  # Present iff type == "page".


def derive_complexity(key_features: list[str]) -> Complexity:
    """Classify by feature count: <=2 simple, 3-5 medium, >5 complex."""
    count = len(key_features)
    if count > 5:
        return "complex"
    if count > 2:
        return "medium"
    return "simple"


def initial_stage_state() -> StageState:
    """Return the setup state. Page completion is sized once a bundle exists."""
    return {
        "stage": "setup",
        "current_page_index": 0,
        "completed": {"framework": False, "pages": [], "linking": False},
        "framework_shown": False,
    }
