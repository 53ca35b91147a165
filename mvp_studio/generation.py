"""Async generation backends fulfilling the setup → framework call.

A generator is any coroutine function `(wizard_input, builder_tools) -> PromptBundle`.
The StageController only awaits it, so a different backend can be swapped in
without touching navigation logic.
"""

import httpx

from mvp_studio.config import get_config
from mvp_studio.errors import GenerationFailure
from mvp_studio.graph import assemble_bundle
from mvp_studio.prompts.discovery import discover_pages
from mvp_studio.state import PromptBundle, ToolDescriptor, WizardInput
from mvp_studio.utils.parsing import parse_pages_response, post_with_retry
from mvp_studio.utils.validator import validate_wizard_input


async def local_generator(
    wizard_input: WizardInput,
    builder_tools: list[ToolDescriptor] | None = None,
) -> PromptBundle:
    """Discover pages with the built-in rules and assemble the bundle."""
    validated = validate_wizard_input(dict(wizard_input))
    return assemble_bundle(validated, discover_pages(validated), builder_tools)


class HttpGenerator:
    """Fetch the page list from a remote discovery service, then assemble locally.

    The service receives {"wizard_input": ...} and answers with
    {"pages": [...], "builder_tools": [...]} (builder_tools optional).
    """

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        config = get_config()
        self.url = url or config["generation_url"]
        self.timeout = timeout if timeout is not None else config.get("generation_timeout", 30)
        self._transport = transport

    async def __call__(
        self,
        wizard_input: WizardInput,
        builder_tools: list[ToolDescriptor] | None = None,
    ) -> PromptBundle:
        validated = validate_wizard_input(dict(wizard_input))

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await post_with_retry(client, self.url, {"wizard_input": validated})
        except httpx.HTTPError as exc:
            raise GenerationFailure(f"Generation service request failed: {exc!r}", cause=exc) from exc

        data = parse_pages_response(response.text)
        tools = builder_tools if builder_tools is not None else data["builder_tools"]
        return assemble_bundle(validated, data["pages"], tools)


def get_generator():
    """Return the generator selected by the generation_backend config key."""
    backend = get_config().get("generation_backend", "local")
    if backend == "http":
        return HttpGenerator()
    if backend == "local":
        return local_generator
    raise ValueError(f"Unknown generation_backend '{backend}'. Must be 'local' or 'http'.")
