"""
Unit tests for oslaunch/actions.py

Tests cover:
- Text selections: path first, URL fallback only when the action allows it
- Empty selections and the opened-file fallback
- Resolved resource selections
- Custom commands run on a temporary file holding the selected text
- Action name parsing
"""

import tempfile
from pathlib import Path

import pytest

from oslaunch.actions import (
    ACTIONS,
    classify_for_action,
    parse_action,
    run_for_paths,
    run_for_text,
    run_with_text_file,
)
from oslaunch.exceptions import ValidationError
from oslaunch.models import (
    Action,
    CustomCommand,
    Invalid,
    InvalidReason,
    LaunchResult,
    ResourceType,
    Url,
    ValidUrl,
)


@pytest.mark.unit
class TestTextSelection:
    """Tests for run_for_text()."""

    def test_url_rejected_when_file_manager_cannot_take_urls(
        self, make_launcher, spawned, generic_linux_caps
    ):
        """The path failure is reported: absolute syntax is checked before existence."""
        outcome = run_for_text(
            Action.FILE_MANAGER, "http://example.com", launcher=make_launcher(generic_linux_caps)
        )

        assert isinstance(outcome, Invalid)
        assert outcome.reason is InvalidReason.NOT_ABSOLUTE
        assert spawned.calls == []

    def test_url_opened_when_file_manager_takes_urls(self, make_launcher, spawned, gnome_caps):
        outcome = run_for_text(
            Action.FILE_MANAGER, "sftp://host/srv", launcher=make_launcher(gnome_caps)
        )

        assert isinstance(outcome, LaunchResult)
        assert outcome.success is True
        assert spawned.argvs == [("nautilus", "sftp://host/srv")]

    def test_shell_never_takes_urls(self, make_launcher, spawned, gnome_caps):
        outcome = run_for_text(
            Action.SHELL, "https://example.com", launcher=make_launcher(gnome_caps)
        )

        assert isinstance(outcome, Invalid)
        assert spawned.calls == []

    def test_path_selection_is_launched(self, sample_tree, make_launcher, spawned, gnome_caps):
        target = sample_tree / "my file.txt"
        outcome = run_for_text(Action.SHELL, f'"{target}"', launcher=make_launcher(gnome_caps))

        assert outcome.success is True
        assert spawned.argvs == [("gnome-terminal", f"--working-directory={sample_tree}")]

    def test_file_manager_selects_by_default(self, sample_tree, make_launcher, spawned, gnome_caps):
        target = sample_tree / "report.txt"
        run_for_text(Action.FILE_MANAGER, str(target), launcher=make_launcher(gnome_caps))

        assert spawned.argvs == [("nautilus", "--select", str(target))]

    def test_select_can_be_turned_off(self, sample_tree, make_launcher, spawned, gnome_caps):
        target = sample_tree / "report.txt"
        run_for_text(
            Action.FILE_MANAGER, str(target), select_file=False, launcher=make_launcher(gnome_caps)
        )

        assert spawned.argvs == [("nautilus", str(sample_tree))]

    def test_missing_path_is_invalid(self, sample_tree, make_launcher, spawned, gnome_caps):
        outcome = run_for_text(
            Action.SYSTEM_APP, str(sample_tree / "gone.txt"), launcher=make_launcher(gnome_caps)
        )

        assert isinstance(outcome, Invalid)
        assert outcome.reason is InvalidReason.NOT_A_URL
        assert spawned.calls == []


@pytest.mark.unit
class TestEmptySelection:
    """An empty selection uses the opened file, if any."""

    @pytest.mark.parametrize("text", [None, "", "   \n"])
    def test_empty_without_opened_file(self, text, make_launcher, spawned, gnome_caps):
        outcome = run_for_text(Action.SHELL, text, launcher=make_launcher(gnome_caps))

        assert isinstance(outcome, Invalid)
        assert outcome.reason is InvalidReason.EMPTY
        assert spawned.calls == []

    def test_empty_uses_opened_file(self, sample_tree, make_launcher, spawned, gnome_caps):
        opened = sample_tree / "report.txt"
        outcome = run_for_text(
            Action.FILE_MANAGER, "", opened_file=opened, launcher=make_launcher(gnome_caps)
        )

        assert outcome.success is True
        assert spawned.argvs == [("nautilus", "--select", str(opened))]

    def test_non_empty_text_ignores_opened_file(
        self, sample_tree, make_launcher, spawned, gnome_caps
    ):
        run_for_text(
            Action.SHELL,
            str(sample_tree / "projects"),
            opened_file=sample_tree / "report.txt",
            launcher=make_launcher(gnome_caps),
        )

        assert spawned.argvs == [
            ("gnome-terminal", f"--working-directory={sample_tree / 'projects'}")
        ]


@pytest.mark.unit
class TestCustomTextSelection:
    """Custom commands on text selections."""

    def test_resource_type_of_command_is_enforced(
        self, sample_tree, make_launcher, spawned, gnome_caps
    ):
        command = CustomCommand(("ls", "${resource_path}"), resource_type=ResourceType.DIRECTORY)
        outcome = run_for_text(
            Action.CUSTOM,
            str(sample_tree / "report.txt"),
            custom_command=command,
            launcher=make_launcher(gnome_caps),
        )

        assert isinstance(outcome, Invalid)
        assert "not a directory" in outcome.message

    def test_url_only_when_command_accepts_urls(self, make_launcher, spawned, gnome_caps):
        launcher = make_launcher(gnome_caps)
        template = ("curl", "-O", "${resource_path}")

        refused = run_for_text(
            Action.CUSTOM,
            "https://example.com/a.zip",
            custom_command=CustomCommand(template),
            launcher=launcher,
        )
        accepted = run_for_text(
            Action.CUSTOM,
            "https://example.com/a.zip",
            custom_command=CustomCommand(template, accepts_urls=True),
            launcher=launcher,
        )

        assert isinstance(refused, Invalid)
        assert accepted.success is True
        assert spawned.argvs == [("curl", "-O", "https://example.com/a.zip")]

    def test_selected_text_written_to_temp_file(
        self, tmp_path, monkeypatch, make_launcher, spawned, gnome_caps
    ):
        monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
        command = CustomCommand(
            ("python", "${resource_path}"), pass_selected_text=True, temp_file_suffix=".py"
        )

        outcome = run_for_text(
            Action.CUSTOM,
            "print('hello')\n",
            custom_command=command,
            launcher=make_launcher(gnome_caps),
        )

        assert outcome.success is True
        (argv,) = spawned.argvs
        temp_file = Path(argv[1])
        assert temp_file.parent == tmp_path
        assert temp_file.name.startswith("oslaunch-selection-")
        assert temp_file.suffix == ".py"
        assert temp_file.read_text(encoding="utf-8") == "print('hello')\n"

    def test_temp_file_failure_is_reported(self, mocker, make_launcher, spawned, gnome_caps):
        mocker.patch(
            "oslaunch.actions.tempfile.NamedTemporaryFile", side_effect=OSError("No space left")
        )

        result = run_with_text_file(
            CustomCommand("cat ${resource_path}"), "text", launcher=make_launcher(gnome_caps)
        )

        assert result.success is False
        assert "Could not create temporary file" in result.error
        assert spawned.calls == []


@pytest.mark.unit
class TestResolvedSelection:
    """Tests for run_for_paths()."""

    def test_multiple_resources(self, sample_tree, make_launcher, spawned, gnome_caps):
        paths = [sample_tree / "report.txt", str(sample_tree / "projects")]
        result = run_for_paths(Action.SHELL, paths, launcher=make_launcher(gnome_caps))

        assert result.success is True
        assert spawned.argvs == [
            ("gnome-terminal", f"--working-directory={sample_tree}"),
            ("gnome-terminal", f"--working-directory={sample_tree / 'projects'}"),
        ]

    def test_custom_command(self, make_launcher, spawned, gnome_caps):
        result = run_for_paths(
            Action.CUSTOM,
            ["/a/b/report.txt"],
            custom_command=CustomCommand(["echo", "${resource_name}"]),
            launcher=make_launcher(gnome_caps),
        )

        assert result.success is True
        assert spawned.argvs == [("echo", "report.txt")]


@pytest.mark.unit
class TestDescriptors:
    """Action descriptors and helpers."""

    def test_every_action_has_a_descriptor(self):
        assert set(ACTIONS) == set(Action)
        assert ACTIONS[Action.FILE_MANAGER].select_file is True
        assert ACTIONS[Action.SHELL].description == "Open shell"

    def test_classify_for_action_uses_capabilities(self, gnome_caps, generic_linux_caps):
        text = "https://example.com"
        assert classify_for_action(text, Action.FILE_MANAGER, capabilities=gnome_caps) == ValidUrl(
            Url(text)
        )
        assert isinstance(
            classify_for_action(text, Action.FILE_MANAGER, capabilities=generic_linux_caps),
            Invalid,
        )

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("filemanager", Action.FILE_MANAGER),
            (" Shell ", Action.SHELL),
            ("SYSTEMAPP", Action.SYSTEM_APP),
            (Action.CUSTOM, Action.CUSTOM),
        ],
    )
    def test_parse_action(self, name, expected):
        assert parse_action(name) is expected

    def test_parse_unknown_action(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_action("explode")
        assert exc_info.value.invalid_value == "explode"
