"""Tests for the Stage Controller: pure transitions, the generation boundary, history and events."""

import asyncio

import pytest

from mvp_studio.controller import (
    FRAMEWORK_TITLE,
    LINKING_TITLE,
    StageController,
    advance,
    dispatch_events,
    enter_framework,
    retreat,
)
from mvp_studio.errors import ConfigurationError, GenerationFailure, TransitionRejected
from mvp_studio.state import initial_stage_state


def _framework_state(page_count=3):
    return enter_framework(initial_stage_state(), page_count)


def _returning(bundle):
    async def generator(wizard_input, builder_tools):
        return bundle
    return generator


def _started(bundle, **kwargs):
    controller = StageController(**kwargs)
    asyncio.run(controller.start(_returning(bundle), bundle["wizard_input"]))
    return controller


# --- Pure transitions ---

class TestEnterFramework:
    def test_sizes_page_flags(self):
        state = _framework_state(3)
        assert state["stage"] == "framework"
        assert state["framework_shown"] is True
        assert state["completed"]["pages"] == [False, False, False]

    def test_zero_pages_raises(self):
        with pytest.raises(ConfigurationError):
            enter_framework(initial_stage_state(), 0)

    def test_only_from_setup(self):
        state = _framework_state()
        assert enter_framework(state, 3) is state


class TestAdvance:
    def test_framework_to_first_page(self):
        state = advance(_framework_state())
        assert state["stage"] == "page"
        assert state["current_page_index"] == 0
        assert state["completed"]["framework"] is True

    def test_framework_not_shown_is_noop(self):
        state = {**_framework_state(), "framework_shown": False}
        assert advance(state) is state

    def test_page_to_next_page_marks_completed(self):
        state = advance(advance(_framework_state()))
        assert state["current_page_index"] == 1
        assert state["completed"]["pages"] == [True, False, False]

    def test_last_page_to_linking(self):
        state = _framework_state(1)
        state = advance(advance(state))
        assert state["stage"] == "linking"
        assert state["completed"]["pages"] == [True]

    def test_linking_to_complete(self):
        state = _framework_state(1)
        for _ in range(3):
            state = advance(state)
        assert state["stage"] == "complete"
        assert state["completed"] == {"framework": True, "pages": [True], "linking": True}

    def test_complete_is_terminal(self):
        state = _framework_state(1)
        for _ in range(3):
            state = advance(state)
        assert advance(state) is state

    def test_setup_is_noop(self):
        state = initial_stage_state()
        assert advance(state) is state

    def test_input_state_not_mutated(self):
        state = _framework_state()
        advance(state)
        assert state["stage"] == "framework"
        assert state["completed"]["framework"] is False


class TestRetreat:
    def test_framework_is_noop(self):
        state = _framework_state()
        assert retreat(state) is state

    def test_setup_and_complete_are_noops(self):
        setup = initial_stage_state()
        assert retreat(setup) is setup
        complete = _framework_state(1)
        for _ in range(3):
            complete = advance(complete)
        assert retreat(complete) is complete

    def test_first_page_back_to_framework(self):
        state = retreat(advance(_framework_state()))
        assert state["stage"] == "framework"
        assert state["completed"]["framework"] is True

    def test_page_back_to_previous_page(self):
        state = advance(advance(_framework_state()))
        state = retreat(state)
        assert state["stage"] == "page"
        assert state["current_page_index"] == 0
        assert state["completed"]["pages"] == [True, False, False]

    def test_back_twice_then_forward_twice(self):
        state = advance(advance(_framework_state()))  # page(1)
        state = retreat(retreat(state))
        assert state["stage"] == "framework"

        state = advance(advance(state))
        assert state["stage"] == "page"
        assert state["current_page_index"] == 1
        assert state["completed"]["pages"] == [True, False, False]

        state = advance(state)
        assert state["completed"]["pages"] == [True, True, False]

    def test_linking_back_to_last_page(self):
        state = _framework_state(2)
        for _ in range(3):
            state = advance(state)
        state = retreat(state)
        assert state["stage"] == "page"
        assert state["current_page_index"] == 1
        assert state["completed"]["pages"] == [True, True]


# --- Controller ---

class TestGenerationBoundary:
    def test_start_enters_framework(self, bundle):
        controller = StageController()
        events = asyncio.run(controller.start(_returning(bundle), bundle["wizard_input"]))
        assert controller.state["stage"] == "framework"
        assert events[0] == {"kind": "stage_changed", "from": "setup", "to": "framework", "page_index": None}
        assert events[1]["kind"] == "prompt_ready"
        assert events[1]["title"] == FRAMEWORK_TITLE
        assert events[1]["text"] == bundle["framework_prompt"]

    def test_transitions_rejected_while_generating(self, bundle):
        async def scenario():
            release = asyncio.Event()

            async def slow_generator(wizard_input, builder_tools):
                await release.wait()
                return bundle

            controller = StageController()
            task = asyncio.create_task(controller.start(slow_generator, bundle["wizard_input"]))
            await asyncio.sleep(0)
            assert controller.generating is True
            with pytest.raises(TransitionRejected):
                controller.next()
            with pytest.raises(TransitionRejected):
                controller.back()
            with pytest.raises(TransitionRejected):
                await controller.start(slow_generator, bundle["wizard_input"])
            release.set()
            await task
            return controller

        controller = asyncio.run(scenario())
        assert controller.generating is False
        assert controller.state["stage"] == "framework"

    def test_next_before_bundle_rejected(self):
        with pytest.raises(TransitionRejected):
            StageController().next()

    def test_failure_leaves_setup_and_is_retryable(self, bundle):
        async def failing(wizard_input, builder_tools):
            raise RuntimeError("service down")

        controller = StageController()
        with pytest.raises(GenerationFailure) as exc_info:
            asyncio.run(controller.start(failing, bundle["wizard_input"]))
        assert exc_info.value.retryable is True
        assert isinstance(exc_info.value.cause, RuntimeError)
        assert controller.state["stage"] == "setup"
        assert controller.generating is False
        assert len(controller.history) == 0

        asyncio.run(controller.start(_returning(bundle), bundle["wizard_input"]))
        assert controller.state["stage"] == "framework"

    def test_configuration_error_propagates_unchanged(self, bundle):
        async def invalid(wizard_input, builder_tools):
            raise ConfigurationError("At least one page is required.")

        controller = StageController()
        with pytest.raises(ConfigurationError):
            asyncio.run(controller.start(invalid, bundle["wizard_input"]))
        assert controller.state["stage"] == "setup"

    def test_start_twice_rejected(self, bundle):
        controller = _started(bundle)
        with pytest.raises(TransitionRejected):
            asyncio.run(controller.start(_returning(bundle), bundle["wizard_input"]))

    def test_discarded_session_ignores_result(self, bundle, capsys):
        async def scenario():
            release = asyncio.Event()

            async def slow_generator(wizard_input, builder_tools):
                await release.wait()
                return bundle

            controller = StageController()
            task = asyncio.create_task(controller.start(slow_generator, bundle["wizard_input"]))
            await asyncio.sleep(0)
            controller.discard()
            release.set()
            return controller, await task

        controller, events = asyncio.run(scenario())
        assert events == []
        assert controller.state["stage"] == "setup"
        assert controller.bundle is None
        assert "discarded" in capsys.readouterr().err


class TestFullFlow:
    def test_history_records_each_stage_in_order(self, bundle):
        controller = _started(bundle)
        for _ in range(5):
            controller.next()

        assert controller.state["stage"] == "complete"
        entries = controller.history.all()
        assert [(e["type"], e["title"]) for e in entries] == [
            ("framework", FRAMEWORK_TITLE),
            ("page", "Home"),
            ("page", "Inventory"),
            ("page", "Recipes"),
            ("linking", LINKING_TITLE),
        ]
        assert [e.get("page_index") for e in entries] == [None, 0, 1, 2, None]
        timestamps = [e["timestamp"] for e in entries]
        assert timestamps == sorted(timestamps)

    def test_history_prompt_is_displayed_text(self, bundle):
        controller = _started(bundle)
        controller.next()
        shown = controller.displayed_text
        controller.next()
        entry = controller.history.all()[1]
        assert entry["prompt"] == shown
        assert entry["prompt"] == bundle["page_prompts"][0]["builder_specific"]["framer"]

    def test_completion_event(self, bundle):
        controller = _started(bundle)
        events = []
        for _ in range(5):
            events = controller.next()
        assert events[-1] == {"kind": "flow_completed", "app_name": "FoodieHub", "total_prompts": 5}
        assert controller.state["completed"] == {
            "framework": True,
            "pages": [True, True, True],
            "linking": True,
        }

    def test_next_at_complete_is_noop(self, bundle):
        controller = _started(bundle)
        for _ in range(5):
            controller.next()
        assert controller.next() == []
        assert len(controller.history) == 5

    def test_pages_marked_generated_when_displayed(self, bundle):
        controller = _started(bundle)
        controller.next()
        flags = [p["generated"] for p in controller.bundle["page_prompts"]]
        assert flags == [True, False, False]
        assert bundle["page_prompts"][0]["generated"] is False


class TestBackNavigation:
    def test_back_keeps_completion_and_history(self, bundle):
        controller = _started(bundle)
        controller.next()  # page 0
        controller.next()  # page 1
        events = controller.back()

        assert events[0] == {"kind": "stage_changed", "from": "page", "to": "page", "page_index": 0}
        assert events[1]["title"] == "Home"
        assert controller.state["completed"]["pages"] == [True, False, False]
        assert len(controller.history) == 2

        controller.back()
        state = controller.state
        assert state["stage"] == "framework"
        assert state["completed"]["framework"] is True
        assert state["completed"]["pages"] == [True, False, False]
        assert controller.back() == []

    def test_revisit_appends_duplicate_entry(self, bundle):
        controller = _started(bundle)
        controller.next()
        controller.back()
        controller.next()
        titles = [e["title"] for e in controller.history.all()]
        assert titles == [FRAMEWORK_TITLE, FRAMEWORK_TITLE]


class TestDisplaySettings:
    def test_builder_defaults_to_top_ranked_tool(self, bundle):
        assert _started(bundle).builder_id == "framer"

    def test_explicit_builder_normalized(self, bundle):
        assert _started(bundle, builder_id=" Uizard ").builder_id == "uizard"

    def test_select_builder_rerenders_page(self, bundle):
        controller = _started(bundle)
        controller.next()
        events = controller.select_builder("Uizard")
        assert events[0]["kind"] == "prompt_ready"
        assert events[0]["text"].startswith(bundle["page_prompts"][0]["prompt"])
        assert "## Enhanced Design Requirements" in events[0]["text"]
        assert controller.displayed_text == events[0]["text"]

    def test_select_builder_before_start_has_no_events(self):
        assert StageController().select_builder("bubble") == []

    def test_set_enhancements_rerenders(self, bundle):
        controller = _started(bundle, builder_id="uizard")
        controller.next()
        events = controller.set_enhancements(animation="playful")
        assert "bouncy animations" in events[0]["text"]
        assert controller.enhancements["animation"] == "playful"

    def test_set_enhancements_rejects_invalid(self, bundle):
        controller = _started(bundle)
        with pytest.raises(ConfigurationError):
            controller.set_enhancements(spacing="cramped")
        assert controller.enhancements["spacing"] == "comfortable"

    def test_linking_text_uses_builder(self, bundle):
        controller = _started(bundle)
        for _ in range(4):
            events = controller.next()
        assert events[1]["title"] == LINKING_TITLE
        assert "## Framer-Specific Implementation" in events[1]["text"]


class TestDispatchEvents:
    def test_routes_by_kind(self):
        received = []
        dispatch_events(
            [{"kind": "prompt_ready", "text": "x"}, {"kind": "stage_changed"}],
            {"prompt_ready": received.append},
        )
        assert received == [{"kind": "prompt_ready", "text": "x"}]

    def test_sink_failure_does_not_propagate(self, capsys):
        def broken(event):
            raise OSError("clipboard unavailable")

        received = []
        dispatch_events(
            [{"kind": "prompt_ready"}, {"kind": "flow_completed"}],
            {"prompt_ready": broken, "flow_completed": received.append},
        )
        assert received == [{"kind": "flow_completed"}]
        assert "prompt_ready sink failed" in capsys.readouterr().err
