"""Turns wizard fields and page specs into copy-paste prompts.

Every function here is pure: the same input always yields byte-identical text.
Optional fields (target audience, user actions, data requirements) are left
out entirely when absent rather than rendered as placeholders.
"""

import re

from mvp_studio.state import PageSpec, WizardInput

APP_TYPE_DESCRIPTIONS = {
    "web-app": "a browser-based web application",
    "mobile-app": "a native mobile application",
    "saas-tool": "a Software-as-a-Service platform",
    "chrome-extension": "a browser extension for Chrome",
    "ai-app": "an AI-powered application",
}

DESIGN_STYLE_DESCRIPTIONS = {
    "minimal": "clean, simple, and focused design with plenty of whitespace",
    "playful": "fun, engaging, and animated interface with vibrant colors",
    "business": "professional, corporate, and formal appearance",
}

PLATFORM_REQUIREMENTS = {
    "web": "responsive web design",
    "android": "Android Material Design guidelines",
    "ios": "iOS Human Interface Guidelines",
    "cross-platform": "cross-platform compatibility (Flutter/React Native)",
}

NAVIGATION_TYPES = {
    "web-app": "sidebar",
    "mobile-app": "bottom-tabs",
    "saas-tool": "sidebar",
    "chrome-extension": "topbar",
    "ai-app": "sidebar",
}

_ENTRY_PAGES = ("Landing", "Onboarding", "Popup")
_HUB_PAGES = ("Dashboard", "Home", "Chat Interface", "Popup")


def _app_type_label(app_type: str) -> str:
    return app_type.replace("-", " ")


def route_path(page_name: str) -> str:
    """Kebab-case route for a page name, e.g. 'Chat Interface' -> '/chat-interface'."""
    return "/" + re.sub(r"\s+", "-", page_name.strip().lower())


def build_navigation(pages: list[PageSpec], app_type: str) -> dict:
    """Derive the navigation type, menu items and page-to-page flows.

    Low-priority pages stay out of the menu but still receive flows from the hub.
    """
    items = [
        {"name": p["name"], "path": route_path(p["name"])}
        for p in pages
        if p.get("priority", "medium") != "low"
    ]
    if not items:
        items = [{"name": p["name"], "path": route_path(p["name"])} for p in pages]

    names = [p["name"] for p in pages]
    entry = next((n for n in names if n in _ENTRY_PAGES), None)
    hub = next((n for n in names if n in _HUB_PAGES and n != entry), None)

    flows = []
    if entry and hub:
        flows.append({
            "from": entry,
            "to": hub,
            "trigger": "Sign Up / Login",
            "condition": "User authenticated",
        })
    if hub:
        for name in names:
            if name not in (entry, hub):
                flows.append({
                    "from": hub,
                    "to": name,
                    "trigger": "Navigation Click",
                    "condition": "User has access",
                })
    else:
        # No hub page: chain the pages in discovery order.
        for current, following in zip(names, names[1:]):
            flows.append({"from": current, "to": following, "trigger": "Next"})

    return {
        "type": NAVIGATION_TYPES.get(app_type, "sidebar"),
        "structure": items,
        "flow": flows,
    }


def render_framework(wizard_input: WizardInput, pages: list[PageSpec] | None = None) -> str:
    """Render the framework prompt describing the whole app structure."""
    app_name = wizard_input["app_name"]
    app_type = wizard_input["app_type"]
    audience = wizard_input.get("target_audience")

    lines = []
    opener = (
        "You are an expert app architect and MVP specialist. Create a comprehensive, "
        f'production-ready framework for "{app_name}", {APP_TYPE_DESCRIPTIONS[app_type]}'
    )
    if audience:
        opener += f" targeting {audience}"
    lines.append(opener + ".")
    lines.append("")

    lines.append("## 🎯 Project Overview")
    lines.append(f"- **App Name**: {app_name}")
    lines.append(f"- **Type**: {_app_type_label(app_type).upper()}")
    lines.append(f"- **Platforms**: {', '.join(wizard_input['platforms'])}")
    lines.append(
        f"- **Design Theme**: {wizard_input['theme']} mode with "
        f"{wizard_input['design_style']} aesthetic"
    )
    if audience:
        lines.append(f"- **Target Audience**: {audience}")
    lines.append(f"- **Complexity Level**: {wizard_input['complexity']}")
    lines.append("")

    if wizard_input.get("description"):
        lines.append("## 💡 Project Vision")
        lines.append(wizard_input["description"])
        lines.append("")

    if wizard_input["key_features"]:
        lines.append("## 🚀 Core Features & Requirements")
        for feature in wizard_input["key_features"]:
            lines.append(f"✅ {feature}")
        lines.append("")

    lines.append("## 📐 Design Requirements")
    lines.append(f"- Design Style: {DESIGN_STYLE_DESCRIPTIONS[wizard_input['design_style']]}")
    lines.append(
        "- Platform Guidelines: "
        + ", ".join(PLATFORM_REQUIREMENTS[p] for p in wizard_input["platforms"])
    )
    lines.append("")

    if pages:
        lines.append(f"## 📱 Page Structure ({len(pages)} pages)")
        for i, page in enumerate(pages, 1):
            priority = page.get("priority")
            heading = f"**{i}. {page['name']} Page**"
            if priority:
                heading += f" (Priority: {priority.upper()})"
            lines.append(heading)
            lines.append(f"- **Purpose**: {page['purpose']}")
            if page["components"]:
                lines.append(f"- **Key Components**: {' • '.join(page['components'])}")
            lines.append(f"- **Layout Pattern**: {page['layout']}")
            lines.append("")

    lines.append("## 🏗️ Technical Specifications")
    lines.append("Please provide a detailed, actionable framework including:")
    lines.append("1. **Architecture Overview**: high-level design, component relationships, data flow")
    lines.append("2. **Data Models & Schema**: core entities, relationships, state management")
    lines.append("3. **Component Hierarchy**: reusable library, page-specific and shared components")
    lines.append("4. **API Design**: endpoint structure, authentication, validation, error handling")
    lines.append("5. **Security & Performance**: data protection, optimization, accessibility")
    lines.append("6. **Development Workflow**: folder structure, testing strategy, deployment")
    lines.append("")
    lines.append(
        "**Output Requirements**: Provide a comprehensive, copy-paste ready framework that "
        "a builder can implement immediately. Focus on an MVP that validates the core "
        "hypothesis while staying extensible."
    )

    return "\n".join(lines)


def render_page(page: PageSpec, wizard_input: WizardInput) -> str:
    """Render the generic UI prompt for a single page."""
    platforms = wizard_input["platforms"]
    audience = wizard_input.get("target_audience")

    lines = [
        "You are an expert UI/UX designer specializing in "
        f"{_app_type_label(wizard_input['app_type'])} development. Create a stunning, "
        f'conversion-optimized {page["name"]} page for "{wizard_input["app_name"]}".',
        "",
        "## 🎯 Page Mission",
        f"**Primary Goal**: {page['purpose']}",
    ]
    if audience:
        lines.append(f"**Target Users**: {audience}")
    if page.get("user_actions"):
        lines.append(f"**Success Metrics**: {', '.join(page['user_actions'])}")
    lines.append("")

    lines.append("## 🎨 Design Specifications")
    lines.append(f"- **Theme**: {wizard_input['theme']} mode with high contrast and readability")
    lines.append(f"- **Style**: {wizard_input['design_style']} aesthetic with modern UI patterns")
    lines.append(
        f"- **Layout Pattern**: {page['layout']} layout optimized for {' and '.join(platforms)}"
    )
    lines.append(
        f"- **Complexity**: {wizard_input['complexity']} - balance features with simplicity"
    )
    lines.append("")

    if page["components"]:
        lines.append("## 🧩 Required Components & Features")
        for component in page["components"]:
            lines.append(f"✅ **{component}**: Interactive, accessible, and responsive")
        lines.append("")

    if page.get("user_actions"):
        lines.append("## 👤 User Experience Flow")
        for i, action in enumerate(page["user_actions"], 1):
            lines.append(f"{i}. **{action}**: Intuitive and frictionless interaction")
        lines.append("")

    if page.get("data_requirements"):
        lines.append("## 📊 Data Integration")
        for data in page["data_requirements"]:
            lines.append(f"🔗 **{data}**: Real-time, accurate, and well-formatted")
        lines.append("")

    lines.append("## 🏗️ Technical Excellence")
    lines.append("- **Responsive Design**: Mobile-first, tablet-optimized, desktop-enhanced")
    lines.append("- **Performance**: Fast loading, optimized images, minimal bundle size")
    lines.append("- **Accessibility**: WCAG 2.1 AA compliant, keyboard navigation, screen reader friendly")
    lines.append("")

    platform_notes = []
    if "android" in platforms or "ios" in platforms:
        platform_notes.append(
            "📱 **Mobile**: Touch-friendly interactions, thumb-zone optimization, swipe gestures"
        )
    if "web" in platforms:
        platform_notes.append("💻 **Web**: Keyboard shortcuts, hover states, browser compatibility")
    if "cross-platform" in platforms:
        platform_notes.append("🔀 **Cross-platform**: Shared components with platform-adaptive styling")
    if platform_notes:
        lines.append("## 📱 Platform-Specific Considerations")
        lines.extend(platform_notes)
        lines.append("")

    lines.append(
        "Create a pixel-perfect, production-ready design that delivers an exceptional "
        "user experience."
    )
    return "\n".join(lines)


def render_linking(pages: list[PageSpec], wizard_input: WizardInput) -> str:
    """Render the navigation and linking prompt connecting every page."""
    navigation = build_navigation(pages, wizard_input["app_type"])
    is_web = "web" in wizard_input["platforms"]

    lines = [
        "Create the complete navigation and linking system for "
        f'"{wizard_input["app_name"]}" ({_app_type_label(wizard_input["app_type"])}).',
        "",
        "## Pages to Connect",
    ]
    for page in pages:
        lines.append(f"- {page['name']}: {page['purpose']}")
    lines.append("")

    lines.append("## Navigation Structure")
    lines.append(f"- **Type**: {navigation['type']}")
    lines.append(f"- **Menu Items**: {', '.join(item['name'] for item in navigation['structure'])}")
    lines.append("")

    if navigation["flow"]:
        lines.append("## Navigation Flow")
        for flow in navigation["flow"]:
            line = f"- **{flow['from']} → {flow['to']}**: {flow['trigger']}"
            if flow.get("condition"):
                line += f" ({flow['condition']})"
            lines.append(line)
        lines.append("")

    lines.append("## Route Definitions")
    lines.append("```")
    for item in navigation["structure"]:
        lines.append(f"{item['path']} → {item['name']}")
    lines.append("```")
    lines.append("")

    lines.append("## Implementation Requirements")
    lines.append("1. **Routing System**: URL structure, nested routes, route parameters, default route")
    lines.append("2. **Navigation Components**: reusable nav bar/sidebar, breadcrumbs, mobile menu")
    lines.append("3. **State Management**: active page state, user context, authentication across routes")
    lines.append("4. **User Flow Logic**: authentication-gated pages, error pages (404, 500), loading states")
    lines.append("")

    lines.append("## Platform-Specific Navigation")
    if is_web:
        lines.append("- Browser navigation (back/forward buttons)")
        lines.append("- URL sharing and bookmarking")
        lines.append("- Tab management")
    else:
        lines.append("- Mobile navigation patterns")
        lines.append("- Gesture-based navigation")
        lines.append("- Hardware back button handling")
    lines.append("")

    lines.append("## Quality Checklist")
    lines.append("- ✅ All pages are accessible from navigation")
    lines.append("- ✅ Back button works correctly")
    lines.append("- ✅ Loading states are implemented")
    lines.append("- ✅ Error pages are handled gracefully")
    lines.append("- ✅ Accessibility standards are met")

    return "\n".join(lines)
