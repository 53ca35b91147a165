"""LangGraph StateGraph for Prompt Bundle assembly: framework → pages → linking."""

from typing import TypedDict

from langgraph.graph import END, StateGraph

from mvp_studio.config import get_config
from mvp_studio.prompts.builders import builder_key, builder_variant
from mvp_studio.prompts.renderer import render_framework, render_linking, render_page
from mvp_studio.state import PagePrompt, PageSpec, PromptBundle, ToolDescriptor, WizardInput
from mvp_studio.utils.validator import validate_pages, validate_wizard_input


class AssemblyState(TypedDict):
    wizard_input: WizardInput
    pages: list[PageSpec]
    builder_tools: list[ToolDescriptor]
    framework_prompt: str
    page_prompts: list[PagePrompt]
    linking_prompt: str


def _framework_node(state: AssemblyState) -> dict:
    """Render the framework prompt once."""
    return {"framework_prompt": render_framework(state["wizard_input"], state["pages"])}


def _pages_node(state: AssemblyState) -> dict:
    """Render one prompt per page, in page order, plus stored builder variants."""
    page_prompts = []
    for page in state["pages"]:
        generic = render_page(page, state["wizard_input"])

        builder_specific = {}
        for tool in state["builder_tools"]:
            variant = builder_variant(generic, tool["name"])
            if variant is not None:
                builder_specific[builder_key(tool["name"])] = variant

        page_prompts.append({
            "page_name": page["name"],
            "components": list(page["components"]),
            "layout": page["layout"],
            "prompt": generic,
            "builder_specific": builder_specific,
            "generated": False,
        })
    return {"page_prompts": page_prompts}


def _linking_node(state: AssemblyState) -> dict:
    """Render the linking prompt across all pages."""
    return {"linking_prompt": render_linking(state["pages"], state["wizard_input"])}


# --- Build the graph ---

workflow = StateGraph(AssemblyState)

workflow.add_node("framework", _framework_node)
workflow.add_node("pages", _pages_node)
workflow.add_node("linking", _linking_node)

workflow.set_entry_point("framework")

workflow.add_edge("framework", "pages")
workflow.add_edge("pages", "linking")
workflow.add_edge("linking", END)

graph = workflow.compile()


def _copy_page(page: PageSpec) -> PageSpec:
    copied = dict(page)
    for key in ("components", "user_actions", "data_requirements"):
        if key in copied:
            copied[key] = list(copied[key])
    return copied


def assemble_bundle(
    wizard_input: WizardInput,
    pages: list[PageSpec],
    builder_tools: list[ToolDescriptor] | None = None,
) -> PromptBundle:
    """Assemble the Prompt Bundle for one wizard session.

    Validation runs before any rendering, so a ConfigurationError (empty or
    duplicate pages, missing required input) means no bundle was built.
    builder_tools defaults to the ranked list in config.
    """
    validated = validate_wizard_input(dict(wizard_input))
    validate_pages(pages)
    pages = [_copy_page(p) for p in pages]
    if builder_tools is None:
        builder_tools = get_config().get("builder_tools", [])
    builder_tools = [dict(tool) for tool in builder_tools]

    final_state = graph.invoke({
        "wizard_input": validated,
        "pages": pages,
        "builder_tools": builder_tools,
        "framework_prompt": "",
        "page_prompts": [],
        "linking_prompt": "",
    })

    return {
        "app_name": validated["app_name"],
        "framework_prompt": final_state["framework_prompt"],
        "page_prompts": final_state["page_prompts"],
        "linking_prompt": final_state["linking_prompt"],
        "builder_tools": builder_tools,
        "complexity": validated["complexity"],
        "pages": pages,
        "wizard_input": validated,
    }


def mark_page_generated(bundle: PromptBundle, index: int) -> PromptBundle:
    """Return a copy of the bundle with one page's generated flag set."""
    page_prompts = list(bundle["page_prompts"])
    page_prompts[index] = {**page_prompts[index], "generated": True}
    return {**bundle, "page_prompts": page_prompts}
