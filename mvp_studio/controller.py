"""Stage Controller: sequences framework, page and linking prompts for one wizard run.

`advance` and `retreat` are pure transition functions over StageState. The
StageController wraps them with the bundle, builder selection, history
ledger and the async generation boundary, and returns side effects as event
dicts for the caller to deliver.
"""

import sys
from typing import Awaitable, Callable

from mvp_studio.config import get_config
from mvp_studio.errors import ConfigurationError, GenerationFailure, TransitionRejected
from mvp_studio.graph import mark_page_generated
from mvp_studio.prompts.builders import (
    builder_key,
    normalize_enhancements,
    resolve_linking_text,
    resolve_prompt_text,
)
from mvp_studio.state import (
    PromptBundle,
    StageState,
    ToolDescriptor,
    WizardInput,
    initial_stage_state,
)
from mvp_studio.utils.history import HistoryRecorder, make_entry

FRAMEWORK_TITLE = "Project Framework"
LINKING_TITLE = "Navigation & Linking"

Generator = Callable[[WizardInput, list[ToolDescriptor] | None], Awaitable[PromptBundle]]


# --- Pure transitions ---


def _with(state: StageState, **updates) -> StageState:
    completed = state["completed"]
    new_state = {
        **state,
        "completed": {
            "framework": completed["framework"],
            "pages": list(completed["pages"]),
            "linking": completed["linking"],
        },
    }
    new_state.update(updates)
    return new_state


def enter_framework(state: StageState, page_count: int) -> StageState:
    """setup → framework once a bundle with page_count pages is installed."""
    if state["stage"] != "setup":
        return state
    if page_count < 1:
        raise ConfigurationError("A bundle needs at least one page.")
    return {
        "stage": "framework",
        "current_page_index": 0,
        "completed": {"framework": False, "pages": [False] * page_count, "linking": False},
        "framework_shown": True,
    }


def advance(state: StageState) -> StageState:
    """Apply Next. Returns the same state object where Next is not available."""
    stage = state["stage"]
    last_index = len(state["completed"]["pages"]) - 1

    if stage == "framework":
        if not state["framework_shown"]:
            return state
        new_state = _with(state, stage="page", current_page_index=0)
        new_state["completed"]["framework"] = True
        return new_state

    if stage == "page":
        index = state["current_page_index"]
        if index < last_index:
            new_state = _with(state, current_page_index=index + 1)
        else:
            new_state = _with(state, stage="linking", current_page_index=last_index)
        new_state["completed"]["pages"][index] = True
        return new_state

    if stage == "linking":
        new_state = _with(state, stage="complete")
        new_state["completed"]["linking"] = True
        return new_state

    # setup is left through enter_framework; complete is terminal.
    return state


def retreat(state: StageState) -> StageState:
    """Apply Back. Returns the same state object at framework, setup and complete.

    Completion flags are never touched.
    """
    stage = state["stage"]

    if stage == "page":
        index = state["current_page_index"]
        if index > 0:
            return _with(state, current_page_index=index - 1)
        return _with(state, stage="framework", current_page_index=0)

    if stage == "linking":
        return _with(state, stage="page", current_page_index=len(state["completed"]["pages"]) - 1)

    return state


# --- Events ---


def _stage_changed(previous: StageState, current: StageState) -> dict:
    return {
        "kind": "stage_changed",
        "from": previous["stage"],
        "to": current["stage"],
        "page_index": current["current_page_index"] if current["stage"] == "page" else None,
    }


def dispatch_events(events: list[dict], sinks: dict[str, Callable[[dict], None]]) -> None:
    """Deliver events to side-effect sinks (clipboard, notifications, ...), keyed by event kind.

    Sink failures are reported on stderr and never propagate to the caller.
    """
    for event in events:
        sink = sinks.get(event["kind"])
        if sink is None:
            continue
        try:
            sink(event)
        except Exception as exc:
            print(
                f"[MVP] Warning: {event['kind']} sink failed: {exc!r}. Continuing.",
                file=sys.stderr,
            )


# --- Controller ---


class StageController:
    """Owns the StageState, Prompt Bundle and history for a single wizard run."""

    def __init__(self, builder_id: str | None = None, enhancements: dict | None = None):
        self._state: StageState = initial_stage_state()
        self._bundle: PromptBundle | None = None
        self._history = HistoryRecorder()
        self._builder_id = builder_key(builder_id) if builder_id else None
        self._enhancements = normalize_enhancements(enhancements)
        self._displayed = ""
        self._generating = False
        self._discarded = False

    # Read-only views

    @property
    def state(self) -> StageState:
        return _with(self._state)

    @property
    def bundle(self) -> PromptBundle | None:
        return self._bundle

    @property
    def history(self) -> HistoryRecorder:
        return self._history

    @property
    def generating(self) -> bool:
        return self._generating

    @property
    def builder_id(self) -> str:
        if self._builder_id:
            return self._builder_id
        if self._bundle and self._bundle["builder_tools"]:
            return builder_key(self._bundle["builder_tools"][0]["name"])
        return builder_key(get_config().get("default_builder", "framer"))

    @property
    def enhancements(self) -> dict:
        return dict(self._enhancements)

    @property
    def displayed_text(self) -> str:
        return self._displayed

    # Generation boundary

    async def start(
        self,
        generator: Generator,
        wizard_input: WizardInput,
        builder_tools: list[ToolDescriptor] | None = None,
    ) -> list[dict]:
        """Run the generation call and move setup → framework.

        While the call is pending every transition is rejected. A
        ConfigurationError propagates unchanged; any other failure leaves the
        controller in setup and is raised as a retryable GenerationFailure.
        """
        if self._generating:
            raise TransitionRejected("Generation already in progress.")
        if self._state["stage"] != "setup":
            raise TransitionRejected(f"Cannot generate from stage '{self._state['stage']}'.")

        self._generating = True
        try:
            bundle = await generator(wizard_input, builder_tools)
        except (ConfigurationError, GenerationFailure):
            raise
        except Exception as exc:
            raise GenerationFailure(f"Framework generation failed: {exc}", cause=exc) from exc
        finally:
            self._generating = False

        if self._discarded:
            print("[MVP] Generation finished after the session was discarded; ignoring result.", file=sys.stderr)
            return []

        previous = self._state
        self._state = enter_framework(previous, len(bundle["page_prompts"]))
        self._bundle = bundle
        return [_stage_changed(previous, self._state), self._show()]

    def discard(self) -> None:
        """Abandon the session. A pending generation result will be ignored."""
        self._discarded = True

    # Navigation

    def _check_ready(self) -> None:
        if self._generating:
            raise TransitionRejected("Generation in progress; try again when it finishes.")
        if self._bundle is None:
            raise TransitionRejected("No prompt bundle yet; run generation first.")

    def next(self) -> list[dict]:
        """Next: record what was shown, then move forward. No-op at complete."""
        self._check_ready()
        previous = self._state
        new_state = advance(previous)
        if new_state is previous:
            return []

        self._history.record(self._entry_for(previous))
        self._state = new_state

        if new_state["stage"] == "page":
            self._bundle = mark_page_generated(self._bundle, new_state["current_page_index"])

        events = [_stage_changed(previous, new_state)]
        if new_state["stage"] == "complete":
            self._displayed = ""
            events.append({
                "kind": "flow_completed",
                "app_name": self._bundle["app_name"],
                "total_prompts": len(self._bundle["page_prompts"]) + 2,
            })
        else:
            events.append(self._show())
        return events

    def back(self) -> list[dict]:
        """Back: move backward without touching history or completion flags."""
        self._check_ready()
        previous = self._state
        new_state = retreat(previous)
        if new_state is previous:
            return []
        self._state = new_state
        return [_stage_changed(previous, new_state), self._show()]

    # Display settings

    def select_builder(self, builder_id: str) -> list[dict]:
        """Switch builder; the current page or linking text is re-rendered."""
        self._builder_id = builder_key(builder_id)
        return self._redisplay()

    def set_enhancements(self, **enhancements) -> list[dict]:
        merged = {**self._enhancements, **enhancements}
        self._enhancements = normalize_enhancements(merged)
        return self._redisplay()

    def _redisplay(self) -> list[dict]:
        if self._bundle is None or self._state["stage"] in ("setup", "complete"):
            return []
        return [self._show()]

    # Rendering

    def current_title(self) -> str:
        stage = self._state["stage"]
        if stage == "framework":
            return FRAMEWORK_TITLE
        if stage == "page":
            return self._bundle["page_prompts"][self._state["current_page_index"]]["page_name"]
        if stage == "linking":
            return LINKING_TITLE
        return ""

    def current_text(self) -> str:
        """Text for the current stage under the current builder and enhancements."""
        stage = self._state["stage"]
        if stage == "framework":
            return self._bundle["framework_prompt"]
        if stage == "page":
            page_prompt = self._bundle["page_prompts"][self._state["current_page_index"]]
            return resolve_prompt_text(page_prompt, self.builder_id, self._enhancements)
        if stage == "linking":
            return resolve_linking_text(self._bundle, self.builder_id)
        return ""

    def _show(self) -> dict:
        self._displayed = self.current_text()
        event = {
            "kind": "prompt_ready",
            "stage": self._state["stage"],
            "title": self.current_title(),
            "text": self._displayed,
        }
        if self._state["stage"] == "page":
            event["page_index"] = self._state["current_page_index"]
        return event

    def _entry_for(self, state: StageState):
        stage = state["stage"]
        if stage == "page":
            index = state["current_page_index"]
            title = self._bundle["page_prompts"][index]["page_name"]
            return make_entry("page", title, self._displayed, page_index=index)
        if stage == "framework":
            return make_entry("framework", FRAMEWORK_TITLE, self._displayed)
        return make_entry("linking", LINKING_TITLE, self._displayed)
