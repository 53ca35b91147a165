"""Renders a Prompt Bundle into markdown, JSON, Notion, text or GPT-ready output."""

import json
import re
from datetime import datetime, timezone
from pathlib import Path

from mvp_studio.config import get_config
from mvp_studio.errors import ExportFormatError
from mvp_studio.prompts.builders import (
    builder_display_name,
    builder_key,
    normalize_enhancements,
    resolve_linking_text,
    resolve_prompt_text,
)
from mvp_studio.state import PromptBundle

EXPORT_FORMATS = ("markdown", "json", "notion", "txt", "gpt-ready")

_EXTENSIONS = {
    "markdown": "md",
    "json": "json",
    "notion": "md",
    "txt": "txt",
    "gpt-ready": "md",
}

BUILDER_USAGE = {
    "framer": """\
1. **Open Framer** → Create new project
2. **Use AI Assistant** → Paste framework prompt first
3. **Create Components** → Use page prompts for each screen
4. **Add Interactions** → Use navigation prompt for linking
5. **Preview & Test** → Check all flows work""",
    "flutterflow": """\
1. **Create New Project** → Choose Flutter app
2. **Set Up Pages** → Use framework prompt to plan structure
3. **Design Each Page** → Use page prompts in UI Builder
4. **Add Navigation** → Use navigation prompt for routing
5. **Configure Backend** → Add Firebase if needed""",
    "webflow": """\
1. **Create New Site** → Start from a blank project
2. **Set Up Pages** → Use framework prompt for structure
3. **Design Each Page** → Use page prompts in the Designer
4. **Link Pages** → Use navigation prompt for routing
5. **Publish** → Deploy to Webflow hosting""",
    "bubble": """\
1. **Create New App** → Start a blank web app
2. **Plan Data Types** → Use framework prompt for the database
3. **Design Each Page** → Use page prompts in the visual editor
4. **Add Workflows** → Use navigation prompt for page redirects
5. **Deploy** → Set privacy rules and go live""",
}

DEFAULT_BUILDER_USAGE = "Follow platform-specific setup instructions."

# Outer fence for prompt blocks; the linking prompt carries its own ``` block.
_FENCE = "~~~"


def _page_text(bundle: PromptBundle, index: int, builder_id: str, enhancements: dict) -> str:
    return resolve_prompt_text(bundle["page_prompts"][index], builder_id, enhancements)


def _render_markdown(bundle, app_name, builder_id, enhancements, exported_at) -> str:
    """Human-readable export with a numbered page checklist."""
    builder_name = builder_display_name(builder_id)
    lines = [
        f"# {app_name} - MVP Builder Prompts",
        "",
        f"Generated on: {exported_at.date().isoformat()}",
        f"Recommended Builder: **{builder_name}**",
        f"Complexity: {bundle['complexity']}",
        f"Total Prompts: {len(bundle['page_prompts']) + 2}",
        "",
        "## 🏗️ Framework Prompt",
        "",
        _FENCE,
        bundle["framework_prompt"],
        _FENCE,
        "",
        "## 📄 Page-by-Page Prompts",
        "",
    ]

    for i, page in enumerate(bundle["page_prompts"]):
        lines.append(f"### {i + 1}. {page['page_name']} Page")
        lines.append("")
        if page["components"]:
            lines.append(f"**Components**: {', '.join(page['components'])}")
        lines.append(f"**Layout**: {page['layout']}")
        lines.append("")
        lines.append(_FENCE)
        lines.append(_page_text(bundle, i, builder_id, enhancements))
        lines.append(_FENCE)
        lines.append("")

    lines.append("## 🔗 Navigation & Linking Prompt")
    lines.append("")
    lines.append(_FENCE)
    lines.append(resolve_linking_text(bundle, builder_id))
    lines.append(_FENCE)
    lines.append("")

    if bundle["builder_tools"]:
        lines.append("## 🛠️ Recommended Builder Tools")
        lines.append("")
        for tool in bundle["builder_tools"]:
            lines.append(f"- **{tool['name']}** ({tool['url']})")
            if tool.get("reasons"):
                lines.append(f"  - Why: {', '.join(tool['reasons'])}")
        lines.append("")

    lines.append("## ✅ Build Checklist")
    lines.append("")
    for i, page in enumerate(bundle["page_prompts"], 1):
        lines.append(f"{i}. [ ] {page['page_name']} page created")
    lines.append("")

    return "\n".join(lines)


def _render_json(bundle, app_name, builder_id, enhancements, exported_at) -> str:
    """Machine-readable export. pages[i].prompt is the stored generic prompt."""
    payload = {
        "metadata": {
            "exportedAt": exported_at.isoformat(),
            "version": "1.0",
            "type": "MVP Blueprint",
        },
        "appName": app_name,
        "recommendedBuilder": builder_id,
        "complexity": bundle["complexity"],
        "framework": {"prompt": bundle["framework_prompt"]},
        "pages": [
            {
                "name": page["page_name"],
                "components": list(page["components"]),
                "layout": page["layout"],
                "prompt": page["prompt"],
                "builderPrompt": _page_text(bundle, i, builder_id, enhancements),
            }
            for i, page in enumerate(bundle["page_prompts"])
        ],
        "linking": {
            "prompt": bundle["linking_prompt"],
            "builderPrompt": resolve_linking_text(bundle, builder_id),
        },
        "builderTools": [
            {"name": tool["name"], "url": tool["url"], "reasons": list(tool.get("reasons", []))}
            for tool in bundle["builder_tools"]
        ],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _render_notion(bundle, app_name, builder_id, enhancements, exported_at) -> str:
    """Markdown flavored for pasting into Notion, with a condensed header."""
    app_type = bundle["wizard_input"]["app_type"]
    lines = [
        f"# {app_name} MVP Builder Guide",
        "",
        f"> 📌 {app_type} · 🛠️ {builder_display_name(builder_id)} · "
        f"📄 {len(bundle['page_prompts'])} pages · 📅 {exported_at.date().isoformat()}",
        "",
        "## 🏗️ Framework Prompt",
        "",
        bundle["framework_prompt"],
        "",
        "## 📄 Page Prompts",
        "",
    ]
    for i, page in enumerate(bundle["page_prompts"]):
        lines.append(f"### 📱 {page['page_name']}")
        lines.append("")
        lines.append(_page_text(bundle, i, builder_id, enhancements))
        lines.append("")

    lines.append("## 🔗 Navigation")
    lines.append("")
    lines.append(resolve_linking_text(bundle, builder_id))
    lines.append("")

    if bundle["builder_tools"]:
        lines.append("## 🧰 Tools")
        lines.append("")
        for tool in bundle["builder_tools"]:
            lines.append(f"- {tool['name']}: {tool['url']}")
        lines.append("")

    return "\n".join(lines)


def _render_text(bundle, app_name, builder_id, enhancements, exported_at) -> str:
    """Flat plain-text export with === separators."""
    lines = [
        f"{app_name} - MVP Builder Prompts",
        "",
        "=== FRAMEWORK ===",
        bundle["framework_prompt"],
        "",
        "=== PAGES ===",
    ]
    for i, page in enumerate(bundle["page_prompts"]):
        lines.append("")
        lines.append(f"--- {page['page_name'].upper()} ---")
        lines.append(_page_text(bundle, i, builder_id, enhancements))
    lines.append("")
    lines.append("=== NAVIGATION ===")
    lines.append(resolve_linking_text(bundle, builder_id))
    lines.append("")
    lines.append("=== TOOLS ===")
    for tool in bundle["builder_tools"]:
        lines.append(f"{tool['name']}: {tool['url']}")
    return "\n".join(lines)


def _render_gpt_ready(bundle, app_name, builder_id, enhancements, exported_at) -> str:
    """Step-by-step copy-paste guide for the selected builder."""
    builder_name = builder_display_name(builder_id)
    lines = [
        f"# {app_name} - GPT-Ready Prompts for {builder_name}",
        "",
        "## 🎯 How to Use These Prompts",
        "",
        "1. **Copy each prompt individually** - Don't paste all at once",
        "2. **Start with Framework Prompt** - This creates your app structure",
        "3. **Then use Page Prompts one by one** - For each screen/page",
        "4. **Finish with Navigation Prompt** - To connect everything",
        "",
        f"## 🧭 {builder_name} Instructions",
        "",
        BUILDER_USAGE.get(builder_key(builder_id), DEFAULT_BUILDER_USAGE),
        "",
        "---",
        "",
        "## 🏗️ FRAMEWORK PROMPT",
        "**Use this first to create your app structure**",
        "",
        _FENCE,
        bundle["framework_prompt"],
        _FENCE,
        "",
        "## 🎨 PAGE PROMPTS",
        "**Use these one by one for each page**",
        "",
    ]
    for i, page in enumerate(bundle["page_prompts"]):
        lines.append(f"### {i + 1}. {page['page_name']} Page")
        lines.append("")
        lines.append(_FENCE)
        lines.append(_page_text(bundle, i, builder_id, enhancements))
        lines.append(_FENCE)
        lines.append("")

    lines.append("## 🔗 NAVIGATION PROMPT")
    lines.append("**Use this last to connect all pages**")
    lines.append("")
    lines.append(_FENCE)
    lines.append(resolve_linking_text(bundle, builder_id))
    lines.append(_FENCE)
    lines.append("")
    lines.append("## 📋 Quick Checklist")
    lines.append("")
    lines.append("- [ ] Framework prompt used")
    for page in bundle["page_prompts"]:
        lines.append(f"- [ ] {page['page_name']} page created")
    lines.append("- [ ] Navigation implemented")
    lines.append("- [ ] App tested")
    lines.append("")
    lines.append(f"**Total Prompts:** {len(bundle['page_prompts']) + 2}")
    return "\n".join(lines)


_RENDERERS = {
    "markdown": _render_markdown,
    "json": _render_json,
    "notion": _render_notion,
    "txt": _render_text,
    "gpt-ready": _render_gpt_ready,
}


def export_bundle(
    bundle: PromptBundle,
    export_format: str,
    builder_id: str | None = None,
    app_name: str | None = None,
    enhancements: dict | None = None,
    exported_at: datetime | None = None,
) -> str:
    """Serialize the bundle in the requested format without modifying it.

    Output depends only on the arguments; pass exported_at for byte-identical
    results across calls. Raises ExportFormatError for unknown formats.
    """
    renderer = _RENDERERS.get(export_format)
    if renderer is None:
        raise ExportFormatError(
            f"Unknown export format '{export_format}'. Must be one of: {list(EXPORT_FORMATS)}"
        )

    if builder_id is None:
        tools = bundle["builder_tools"]
        builder_id = tools[0]["name"] if tools else get_config().get("default_builder", "framer")
    builder_id = builder_key(builder_id)

    return renderer(
        bundle,
        app_name or bundle["app_name"],
        builder_id,
        normalize_enhancements(enhancements),
        exported_at or datetime.now(timezone.utc),
    )


def export_filename(app_name: str, export_format: str) -> str:
    """Return '<kebab-app-name>-mvp-prompts.<ext>'.

    The stem keeps only [a-z0-9-], so the name never contains path separators.
    """
    if export_format not in _EXTENSIONS:
        raise ExportFormatError(f"Unknown export format '{export_format}'.")
    stem = re.sub(r"[^a-z0-9]+", "-", app_name.lower()).strip("-") or "mvp"
    return f"{stem}-mvp-prompts.{_EXTENSIONS[export_format]}"


def write_export(content: str, app_name: str, export_format: str, output_dir: str | Path | None = None) -> Path:
    """Write an export under the configured output directory.

    Existing files are never overwritten; a ' (2)', ' (3)', ... suffix is added.
    Returns the Path to the written file.
    """
    if output_dir is None:
        output_dir = Path(__file__).resolve().parent.parent.parent / get_config()["output_dir"]
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    filename = export_filename(app_name, export_format)
    stem, suffix = filename.rsplit(".", 1)
    output_path = output_dir / filename
    counter = 1
    while output_path.exists():
        counter += 1
        output_path = output_dir / f"{stem} ({counter}).{suffix}"

    output_path.write_text(content, encoding="utf-8")
    return output_path
