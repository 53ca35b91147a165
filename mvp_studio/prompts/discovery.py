"""Rule-based page discovery from the app type and key features.

Used by the local generation backend. Remote backends return their own page
lists, which go through the same validation before assembly.
"""

from mvp_studio.state import PageSpec, WizardInput

BASE_PAGES = {
    "web-app": [
        ("Landing", "Welcome users and showcase value proposition", ["Hero", "Features", "CTA"], "vertical", "high"),
        ("Dashboard", "Main user interface and navigation hub", ["Sidebar", "Stats", "Quick Actions"], "sidebar", "high"),
        ("Profile", "User account management and settings", ["Avatar", "Form", "Settings"], "centered", "medium"),
    ],
    "mobile-app": [
        ("Onboarding", "Introduce app features and get user started", ["Slides", "Progress", "CTA"], "vertical", "high"),
        ("Home", "Main app interface and navigation", ["Header", "Content", "Bottom Nav"], "vertical", "high"),
        ("Profile", "User profile and app settings", ["Avatar", "Menu Items", "Settings"], "vertical", "medium"),
    ],
    "saas-tool": [
        ("Landing", "Convert visitors to trial users", ["Hero", "Features", "Pricing", "Testimonials"], "vertical", "high"),
        ("Dashboard", "Main workspace and analytics overview", ["Sidebar", "Charts", "Widgets", "Actions"], "dashboard", "high"),
        ("Workspace", "Core tool functionality and features", ["Toolbar", "Canvas", "Sidebar", "Properties"], "dashboard", "high"),
        ("Billing", "Subscription management and payments", ["Plans", "Payment Form", "History"], "centered", "medium"),
    ],
    "chrome-extension": [
        ("Popup", "Quick access to main features", ["Header", "Actions", "Status"], "vertical", "high"),
        ("Options", "Extension settings and configuration", ["Tabs", "Forms", "Save Button"], "centered", "medium"),
    ],
    "ai-app": [
        ("Chat Interface", "Main AI interaction interface", ["Chat Window", "Input", "Suggestions"], "vertical", "high"),
        ("Results", "Display AI-generated results", ["Results Grid", "Export", "Actions"], "grid", "high"),
        ("Settings", "AI model and app configuration", ["Model Selector", "Parameters", "API Keys"], "centered", "medium"),
    ],
}

# (keywords, page) pairs; a feature matching any keyword adds the page.
FEATURE_PAGES = [
    (("analytics", "report"), ("Analytics", "Data visualization and insights", ["Charts", "Filters", "Export", "Date Picker"], "dashboard", "medium")),
    (("admin", "management"), ("Admin", "Administrative controls and user management", ["User Table", "Actions", "Filters", "Bulk Operations"], "dashboard", "low")),
    (("chat", "message"), ("Messages", "Communication and messaging interface", ["Chat List", "Message Thread", "Input", "Attachments"], "sidebar", "medium")),
]

THEME_COMPONENTS = {
    "dark-minimal": ["Glass Cards", "Subtle Shadows", "Monospace Fonts"],
    "dark-playful": ["Gradient Backgrounds", "Animated Icons", "Colorful Accents"],
    "dark-business": ["Professional Cards", "Corporate Colors", "Clean Typography"],
    "light-minimal": ["Clean Cards", "Soft Shadows", "Sans-serif Fonts"],
    "light-playful": ["Bright Colors", "Fun Animations", "Rounded Elements"],
    "light-business": ["Professional Layout", "Business Colors", "Structured Design"],
}

USER_ACTIONS = {
    "Landing": ["Sign Up", "Learn More", "View Demo", "Contact Sales"],
    "Dashboard": ["View Analytics", "Quick Actions", "Navigate Sections", "Search"],
    "Profile": ["Edit Profile", "Change Password", "Update Preferences", "Delete Account"],
    "Onboarding": ["Next Step", "Skip", "Complete Setup", "Get Help"],
    "Workspace": ["Create Project", "Edit Content", "Save Changes", "Share"],
    "Analytics": ["Filter Data", "Export Report", "Change Date Range", "Drill Down"],
}
DEFAULT_USER_ACTIONS = ["View", "Edit", "Save", "Cancel"]

DATA_REQUIREMENTS = {
    "Landing": ["Page Content", "Feature List", "Testimonials", "Pricing"],
    "Dashboard": ["User Data", "Analytics", "Recent Activity", "Quick Stats"],
    "Profile": ["User Info", "Preferences", "Account Settings", "Security"],
    "Analytics": ["Time Series Data", "Metrics", "Filters", "Export Data"],
    "Workspace": ["Project Data", "User Permissions", "Content", "History"],
}
DEFAULT_DATA_REQUIREMENTS = ["Basic Data", "User Context"]


def discover_pages(wizard_input: WizardInput) -> list[PageSpec]:
    """Return the ordered, uniquely named pages for the app.

    Base pages for the app type come first, then feature-triggered pages in
    feature order. A page triggered twice is kept once.
    """
    templates = list(BASE_PAGES.get(wizard_input["app_type"], BASE_PAGES["web-app"]))
    for feature in wizard_input["key_features"]:
        lowered = feature.lower()
        for keywords, template in FEATURE_PAGES:
            if any(k in lowered for k in keywords):
                templates.append(template)

    extras = THEME_COMPONENTS.get(f"{wizard_input['theme']}-{wizard_input['design_style']}", [])

    pages: list[PageSpec] = []
    seen = set()
    for name, purpose, components, layout, priority in templates:
        if name in seen:
            continue
        seen.add(name)
        pages.append({
            "name": name,
            "purpose": purpose,
            "components": components + extras,
            "layout": layout,
            "priority": priority,
            "user_actions": list(USER_ACTIONS.get(name, DEFAULT_USER_ACTIONS)),
            "data_requirements": list(DATA_REQUIREMENTS.get(name, DEFAULT_DATA_REQUIREMENTS)),
        })
    return pages
