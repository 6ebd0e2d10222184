"""Tests for domain/action_parser.py — pure Python, no filesystem."""

import pytest

from workspace_claw.domain.action_parser import (
    HEADER_LABELS,
    MAX_ACTIONS_PER_MESSAGE,
    Buffering,
    ContentClose,
    ContentOpen,
    HeaderLine,
    Prose,
    Rejected,
    classify_line,
    format_action_list,
    has_action_markers,
    parse_actions,
    parse_actions_with_diagnostics,
    strip_actions,
)
from workspace_claw.domain.models import (
    CopyFile,
    CreateDirectory,
    CreateFile,
    DeleteDirectory,
    DeleteFile,
    EditFile,
    MoveFile,
)


class TestSingleMarkers:
    @pytest.mark.parametrize(
        "marker, cls",
        [
            ("[CREATE_FILE:a.txt:make a]", CreateFile),
            ("[CREATE_DIRECTORY:a:make dir]", CreateDirectory),
            ("[DELETE_FILE:a.txt:remove a]", DeleteFile),
            ("[DELETE_DIRECTORY:a:remove dir]", DeleteDirectory),
            ("[EDIT_FILE:a.txt:rewrite a]", EditFile),
        ],
    )
    def test_single_path_markers(self, marker, cls):
        actions = parse_actions(marker)
        assert len(actions) == 1
        assert isinstance(actions[0], cls)
        assert actions[0].path in ("a.txt", "a")
        assert actions[0].description

    def test_create_file_starts_empty(self):
        actions = parse_actions("[CREATE_FILE:src/x.js:add helper]")
        assert actions[0].content == ""
        assert actions[0].description == "add helper"

    def test_create_folder_alias(self):
        actions = parse_actions("[CREATE_FOLDER:x:y]")
        assert actions == [CreateDirectory(path="x", description="y")]

    def test_move_file(self):
        actions = parse_actions("[MOVE_FILE:old/a.txt:new/a.txt:relocate]")
        assert actions == [
            MoveFile(source_path="old/a.txt", destination_path="new/a.txt", description="relocate")
        ]

    def test_copy_file(self):
        actions = parse_actions("[COPY_FILE:a.txt:b.txt:duplicate]")
        assert actions == [CopyFile(source_path="a.txt", destination_path="b.txt", description="duplicate")]

    def test_description_may_contain_colons(self):
        actions = parse_actions("[CREATE_FILE:a.py:note: keep it short]")
        assert actions[0].path == "a.py"
        assert actions[0].description == "note: keep it short"

    def test_fields_are_trimmed(self):
        actions = parse_actions("[DELETE_FILE: a.txt : cleanup ]")
        assert actions[0].path == "a.txt"
        assert actions[0].description == "cleanup"


class TestMarkerPlacement:
    def test_prose_around_marker_on_same_line(self):
        actions = parse_actions("Sure, I will [DELETE_FILE:tmp.log:cleanup] right away.")
        assert actions == [DeleteFile(path="tmp.log", description="cleanup")]

    def test_order_follows_text(self):
        text = (
            "[CREATE_DIRECTORY:d:dir]\n"
            "some prose\n"
            "[CREATE_FILE:d/f.txt:file]\n"
            "[DELETE_FILE:old.txt:gone]"
        )
        kinds = [a.kind for a in parse_actions(text)]
        assert kinds == ["CREATE_DIRECTORY", "CREATE_FILE", "DELETE_FILE"]

    def test_one_marker_per_line_by_priority(self):
        # CREATE_FILE outranks EDIT_FILE even when it appears later on the line
        actions = parse_actions("[EDIT_FILE:a.txt:x] [CREATE_FILE:b.txt:y]")
        assert len(actions) == 1
        assert isinstance(actions[0], CreateFile)
        assert actions[0].path == "b.txt"

    def test_plain_prose_yields_nothing(self):
        assert parse_actions("Nothing to do here.\nJust talk.") == []

    def test_empty_and_non_string_input(self):
        assert parse_actions("") == []
        assert parse_actions(None) == []


class TestMalformedMarkers:
    def test_move_with_two_fields_is_dropped(self):
        assert parse_actions("[MOVE_FILE:a.txt:moving]") == []

    def test_copy_with_two_fields_is_dropped(self):
        assert parse_actions("[COPY_FILE:a.txt:copying]") == []

    def test_missing_description(self):
        assert parse_actions("[CREATE_FILE:a.txt]") == []

    def test_unbalanced_bracket(self):
        assert parse_actions("[CREATE_FILE:a.txt:desc") == []

    def test_empty_field_after_trim(self):
        assert parse_actions("[DELETE_FILE:   :desc]") == []

    def test_absolute_path_rejected(self):
        assert parse_actions("[DELETE_FILE:/etc/passwd:oops]") == []

    def test_lowercase_label_not_recognized(self):
        assert parse_actions("[create_file:a.txt:desc]") == []

    def test_malformed_line_does_not_stop_batch(self):
        text = "[MOVE_FILE:a:b]\n[CREATE_FILE:ok.txt:fine]"
        actions = parse_actions(text)
        assert len(actions) == 1
        assert actions[0].path == "ok.txt"


class TestContentBlocks:
    def test_scenario_from_chat_reply(self):
        text = (
            "Sure! [CREATE_FILE:src/x.js:add helper]\n"
            "[FILE_CONTENT:src/x.js]\n"
            "console.log(1);\n"
            "[/FILE_CONTENT]\n"
            "Done."
        )
        actions = parse_actions(text)
        assert len(actions) == 1
        assert isinstance(actions[0], CreateFile)
        assert actions[0].path == "src/x.js"
        assert actions[0].content == "console.log(1);"

    def test_multiline_content_drops_blank_lines(self):
        text = (
            "[CREATE_FILE:a.py:module]\n"
            "[FILE_CONTENT:a.py]\n"
            "\n"
            "def f():\n"
            "\n"
            "    return 1\n"
            "\n"
            "[/FILE_CONTENT]"
        )
        actions = parse_actions(text)
        assert actions[0].content == "def f():\n    return 1"

    def test_indentation_is_kept(self):
        text = (
            "[CREATE_FILE:a.py:module]\n"
            "[FILE_CONTENT:a.py]\n"
            "if x:\n"
            "    y()\n"
            "[/FILE_CONTENT]"
        )
        assert parse_actions(text)[0].content == "if x:\n    y()"

    def test_binds_to_most_recent_matching_create(self):
        text = (
            "[CREATE_FILE:a.txt:first]\n"
            "[CREATE_FILE:b.txt:other]\n"
            "[CREATE_FILE:a.txt:second]\n"
            "[FILE_CONTENT:a.txt]\n"
            "hello\n"
            "[/FILE_CONTENT]"
        )
        actions = parse_actions(text)
        assert actions[0].content == ""
        assert actions[1].content == ""
        assert actions[2].content == "hello"

    def test_block_before_its_create_is_discarded(self):
        text = (
            "[FILE_CONTENT:a.txt]\n"
            "early\n"
            "[/FILE_CONTENT]\n"
            "[CREATE_FILE:a.txt:late]"
        )
        actions = parse_actions(text)
        assert len(actions) == 1
        assert actions[0].content == ""

    def test_unbound_block_adds_no_action(self):
        text = "[FILE_CONTENT:ghost.txt]\nboo\n[/FILE_CONTENT]"
        assert parse_actions(text) == []

    def test_block_does_not_bind_to_edit_file(self):
        text = "[EDIT_FILE:a.txt:rewrite]\n[FILE_CONTENT:a.txt]\nnew\n[/FILE_CONTENT]"
        actions = parse_actions(text)
        assert actions[0].content == ""

    def test_lone_close_marker_is_ignored(self):
        actions = parse_actions("[/FILE_CONTENT]\n[CREATE_DIRECTORY:d:dir]")
        assert actions == [CreateDirectory(path="d", description="dir")]

    def test_second_open_abandons_first(self):
        text = (
            "[CREATE_FILE:a.txt:a]\n"
            "[CREATE_FILE:b.txt:b]\n"
            "[FILE_CONTENT:a.txt]\n"
            "for a\n"
            "[FILE_CONTENT:b.txt]\n"
            "for b\n"
            "[/FILE_CONTENT]"
        )
        a, b = parse_actions(text)
        assert a.content == ""
        assert b.content == "for b"

    def test_unterminated_block_is_discarded(self):
        text = "[CREATE_FILE:a.txt:a]\n[FILE_CONTENT:a.txt]\nnever closed"
        assert parse_actions(text)[0].content == ""

    def test_header_inside_block_is_an_action_not_content(self):
        text = (
            "[CREATE_FILE:a.txt:a]\n"
            "[FILE_CONTENT:a.txt]\n"
            "line one\n"
            "[CREATE_DIRECTORY:d:dir]\n"
            "line two\n"
            "[/FILE_CONTENT]"
        )
        actions = parse_actions(text)
        assert [x.kind for x in actions] == ["CREATE_FILE", "CREATE_DIRECTORY"]
        assert actions[0].content == "line one\nline two"

    def test_windows_line_endings(self):
        text = "[CREATE_FILE:a.txt:a]\r\n[FILE_CONTENT:a.txt]\r\nhi\r\n[/FILE_CONTENT]\r\n"
        assert parse_actions(text)[0].content == "hi"

    def test_unicode_separators_stay_inside_content(self):
        body = 'const s = "a\u2028b";\fnext\x85end'
        text = f"[CREATE_FILE:s.js:sep]\n[FILE_CONTENT:s.js]\n{body}\n[/FILE_CONTENT]"
        assert parse_actions(text)[0].content == body

    def test_diagnostic_line_numbers_count_only_newlines(self):
        _, diags = parse_actions_with_diagnostics("a\fb c\n[MOVE_FILE:x:y]")
        assert [d.line_no for d in diags] == [2]


class TestClassifyLine:
    def test_header(self):
        result = classify_line("x [DELETE_FILE:a:b] y")
        assert isinstance(result, HeaderLine)
        assert result.span == (2, 19)

    def test_content_open(self):
        assert classify_line("[FILE_CONTENT:a.txt]") == ContentOpen("a.txt")

    def test_content_close(self):
        assert isinstance(classify_line("[/FILE_CONTENT]"), ContentClose)

    def test_rejected(self):
        assert isinstance(classify_line("[CREATE_FILE:/abs:desc]"), Rejected)

    def test_prose(self):
        assert classify_line("hello") == Prose("hello")

    def test_buffering_text_is_trimmed(self):
        block = Buffering(path="a", opened_at=1, lines=["\n", "  x\n", "y\n"])
        assert block.text() == "x\ny"


class TestDiagnostics:
    def test_silent_by_default(self):
        # no list passed: nothing to inspect, nothing raised
        assert parse_actions("[MOVE_FILE:a:b]") == []

    def test_reports_absorbed_anomalies(self):
        text = (
            "[MOVE_FILE:a:b]\n"
            "[/FILE_CONTENT]\n"
            "[FILE_CONTENT:ghost.txt]\n"
            "boo\n"
            "[/FILE_CONTENT]\n"
            "[CREATE_FILE:/abs.txt:x]"
        )
        actions, diagnostics = parse_actions_with_diagnostics(text)
        assert actions == []
        reasons = [d.reason for d in diagnostics]
        assert len(diagnostics) == 4
        assert diagnostics[0].line_no == 1
        assert "unrecognized marker" in reasons[0]
        assert "without an open block" in reasons[1]
        assert "ghost.txt" in reasons[2]
        assert "absolute path" in reasons[3]

    def test_reports_abandoned_and_unterminated_blocks(self):
        text = (
            "[CREATE_FILE:a.txt:a]\n"
            "[FILE_CONTENT:a.txt]\n"
            "x\n"
            "[FILE_CONTENT:a.txt]\n"
            "y"
        )
        diagnostics = []
        parse_actions(text, diagnostics)
        assert len(diagnostics) == 2
        assert "abandoned" in diagnostics[0].reason
        assert "never closed" in diagnostics[1].reason
        assert diagnostics[1].line_no == 4

    def test_marker_text_inside_content_is_not_flagged(self):
        text = (
            "[CREATE_FILE:doc.md:docs]\n"
            "[FILE_CONTENT:doc.md]\n"
            "Use [MOVE_FILE:a:b] carefully\n"
            "[/FILE_CONTENT]"
        )
        actions, diagnostics = parse_actions_with_diagnostics(text)
        assert diagnostics == []
        assert actions[0].content == "Use [MOVE_FILE:a:b] carefully"


class TestHasActionMarkers:
    @pytest.mark.parametrize("label", HEADER_LABELS)
    def test_detects_every_label(self, label):
        assert has_action_markers(f"text [{label}:x") is True

    def test_content_marker_alone_is_not_an_action(self):
        assert has_action_markers("[FILE_CONTENT:a]\nx\n[/FILE_CONTENT]") is False

    def test_plain_text(self):
        assert has_action_markers("just talk") is False
        assert has_action_markers("") is False


class TestStripActions:
    def test_keeps_prose_only(self):
        text = (
            "Sure! [CREATE_FILE:src/x.js:add helper]\n"
            "[FILE_CONTENT:src/x.js]\n"
            "console.log(1);\n"
            "[/FILE_CONTENT]\n"
            "Done."
        )
        assert strip_actions(text) == "Sure!\nDone."

    def test_no_markers(self):
        assert strip_actions("just text") == "just text"

    def test_only_markers(self):
        assert strip_actions("[DELETE_FILE:a:b]") == ""

    def test_prose_keeps_line_separator_characters(self):
        assert strip_actions("one\u2028two\n[DELETE_FILE:a:b]") == "one\u2028two"


class TestFormatActionList:
    def test_numbered_preview(self):
        actions = parse_actions("[CREATE_DIRECTORY:d:dir]\n[MOVE_FILE:a:d/a:move]")
        assert format_action_list(actions) == (
            "1. CREATE_DIRECTORY d (dir)\n"
            "2. MOVE_FILE a -> d/a (move)"
        )


def test_max_actions_default():
    assert MAX_ACTIONS_PER_MESSAGE == 50
