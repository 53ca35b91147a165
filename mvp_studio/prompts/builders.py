"""Builder variant resolution: picks the page text shown for a given builder tool.

Two tiers, in order:
1. A stored builder-specific rendering (keyed by lower-cased builder id) is
   returned verbatim, never enhanced further.
2. Otherwise the generic prompt is extended with the enhancement block, the
   builder instruction block and the quality checklist.
"""

from mvp_studio.config import get_config
from mvp_studio.errors import ConfigurationError
from mvp_studio.state import EnhancementConfig, PagePrompt, PromptBundle

ENHANCEMENT_SENTENCES = {
    "color_scheme": {
        "vibrant": "Use vibrant, energetic colors with high contrast.",
        "pastel": "Use soft, pastel colors for a gentle, approachable feel.",
        "monochrome": "Use a sophisticated monochrome palette with accent colors.",
        "default": "Use a balanced color palette appropriate for the design style.",
    },
    "animation": {
        "none": "No animations - focus on static, clean design.",
        "subtle": "Add subtle hover effects and smooth transitions.",
        "dynamic": "Include engaging animations and micro-interactions.",
        "playful": "Use fun, bouncy animations that delight users.",
    },
    "spacing": {
        "compact": "Use tight spacing for information-dense layouts.",
        "comfortable": "Use comfortable spacing for easy reading and navigation.",
        "spacious": "Use generous whitespace for a premium, luxurious feel.",
    },
    "typography": {
        "modern": "Use modern, clean sans-serif fonts.",
        "classic": "Use traditional, readable serif fonts.",
        "playful": "Use friendly, rounded fonts with personality.",
        "technical": "Use monospace or technical fonts for a developer feel.",
    },
}

# Appended to the enhanced generic prompt.
BUILDER_INSTRUCTIONS = {
    "framer": """\
**Framer Instructions:**
- Use Framer's component variants for different states
- Implement smooth page transitions and micro-interactions
- Utilize Framer's responsive breakpoint system
- Add hover effects and interactive elements
- Use Framer's built-in CMS for dynamic content""",
    "flutterflow": """\
**FlutterFlow Instructions:**
- Design with mobile-first approach
- Use FlutterFlow's widget library and custom widgets
- Implement proper navigation and state management
- Add Firebase integration for backend functionality
- Ensure cross-platform compatibility (iOS/Android)""",
    "webflow": """\
**Webflow Instructions:**
- Use Webflow's class-based styling system
- Implement responsive design with Webflow's grid
- Add Webflow CMS for dynamic content management
- Use Webflow's interaction system for animations
- Optimize for SEO with proper meta tags and structure""",
    "bubble": """\
**Bubble Instructions:**
- Design with Bubble's responsive engine
- Use Bubble's database for data storage and management
- Implement workflows for user interactions and logic
- Add proper privacy rules for data security
- Utilize Bubble's plugin ecosystem for extended functionality""",
}

DEFAULT_BUILDER_INSTRUCTIONS = "Follow platform-specific best practices for optimal results."

# Stored per page at assembly time for every ranked tool with a known section.
BUILDER_PAGE_SECTIONS = {
    "framer": """\
## Framer-Specific Instructions
- Use Framer's component system
- Implement smooth animations and transitions
- Utilize Framer's responsive breakpoints
- Add interactive hover states and micro-interactions
- Use Framer's built-in CMS if content is dynamic""",
    "flutterflow": """\
## FlutterFlow-Specific Instructions
- Design for mobile-first approach
- Use FlutterFlow's widget library
- Implement proper navigation between screens
- Add Firebase integration for backend
- Use FlutterFlow's state management
- Ensure cross-platform compatibility""",
    "webflow": """\
## Webflow-Specific Instructions
- Use Webflow's class-based styling system
- Implement responsive design with Webflow's grid
- Add Webflow CMS for dynamic content
- Use Webflow's interaction system for animations
- Optimize for SEO with Webflow's built-in tools""",
    "bubble": """\
## Bubble-Specific Instructions
- Design with Bubble's responsive engine
- Use Bubble's database for data storage
- Implement workflows for user interactions
- Add proper privacy rules for data security
- Use Bubble's plugin ecosystem for extended functionality""",
}

BUILDER_LINKING_INSTRUCTIONS = {
    "framer": "Use Framer's page linking system and implement smooth page transitions.",
    "flutterflow": "Implement Flutter navigation with proper route management and state persistence.",
    "webflow": "Use Webflow's native linking system and implement custom interactions for navigation.",
    "bubble": "Create Bubble workflows for navigation and implement proper page redirects.",
}

DEFAULT_LINKING_INSTRUCTIONS = "Follow platform-specific navigation best practices."

QUALITY_CHECKLIST = """\
## Quality Checklist
- ✅ Responsive design for all screen sizes
- ✅ Accessibility compliance (WCAG 2.1)
- ✅ Fast loading and performance optimized
- ✅ Consistent with overall app design system
- ✅ User-friendly and intuitive interface"""


def builder_key(builder_id: str) -> str:
    """Normalize a builder id or tool name for lookups."""
    return builder_id.strip().lower()


def builder_display_name(builder_id: str) -> str:
    return builder_id[:1].upper() + builder_id[1:] if builder_id else builder_id


def normalize_enhancements(enhancements: dict | None = None) -> EnhancementConfig:
    """Fill missing axes from config defaults and reject values outside each enumeration."""
    merged = dict(get_config().get("enhancements", {}))
    merged.update(enhancements or {})

    normalized = {}
    for axis, sentences in ENHANCEMENT_SENTENCES.items():
        value = merged.get(axis)
        if value not in sentences:
            raise ConfigurationError(
                f"Invalid {axis} '{value}'. Must be one of: {sorted(sentences)}"
            )
        normalized[axis] = value
    return normalized


def builder_variant(generic_prompt: str, tool_name: str) -> str | None:
    """Return the stored builder-specific page text, or None for builders without one."""
    section = BUILDER_PAGE_SECTIONS.get(builder_key(tool_name))
    if section is None:
        return None
    return f"{generic_prompt}\n\n{section}"


def enhance_prompt(generic_prompt: str, builder_id: str, enhancements: EnhancementConfig) -> str:
    """Append the enhancement, builder instruction and checklist blocks to a generic prompt."""
    enhancement_text = "\n".join(
        f"- {ENHANCEMENT_SENTENCES[axis][enhancements[axis]]}"
        for axis in ENHANCEMENT_SENTENCES
    )
    instructions = BUILDER_INSTRUCTIONS.get(builder_key(builder_id), DEFAULT_BUILDER_INSTRUCTIONS)

    return (
        f"{generic_prompt}\n\n"
        f"## Enhanced Design Requirements\n{enhancement_text}\n\n"
        f"## Builder-Specific Instructions\n{instructions}\n\n"
        f"{QUALITY_CHECKLIST}"
    )


def resolve_prompt_text(
    page_prompt: PagePrompt,
    builder_id: str,
    enhancements: dict | None = None,
) -> str:
    """Return the page text to show for the selected builder.

    Stored builder-specific text wins and is returned byte-for-byte.
    Otherwise the generic prompt is enhanced for the builder.
    """
    stored = page_prompt["builder_specific"].get(builder_key(builder_id))
    if stored is not None:
        return stored
    return enhance_prompt(page_prompt["prompt"], builder_id, normalize_enhancements(enhancements))


def resolve_linking_text(bundle: PromptBundle, builder_id: str) -> str:
    """Return the linking prompt followed by builder-specific navigation setup."""
    name = builder_display_name(builder_id)
    instructions = BUILDER_LINKING_INSTRUCTIONS.get(
        builder_key(builder_id), DEFAULT_LINKING_INSTRUCTIONS
    )
    return (
        f"{bundle['linking_prompt']}\n\n"
        f"## {name}-Specific Implementation\n"
        f"{instructions}\n\n"
        f"### {name} Navigation Setup:\n"
        "1. Configure routing system according to platform\n"
        "2. Implement navigation components using platform widgets\n"
        "3. Set up state management for navigation\n"
        "4. Add platform-specific animations and transitions\n"
        "5. Test navigation flow on target devices/browsers"
    )
