"""Tests for command-line tokenizing."""

import pytest

from oslaunch.tokenizer import join_tokens, tokenize


@pytest.mark.unit
class TestTokenize:
    """Tests for tokenize()."""

    def test_single_word_is_kept_whole(self):
        assert tokenize("gedit") == ["gedit"]

    def test_quoted_executable_with_spaces_is_one_token_without_quotes(self):
        command = '"C:\\Program Files\\Notepad++\\notepad++.exe"'
        assert tokenize(command) == ["C:\\Program Files\\Notepad++\\notepad++.exe"]

    def test_quoted_path_is_launchable_as_program(self):
        assert tokenize('"/opt/My App/run"') == ["/opt/My App/run"]

    def test_splits_on_whitespace(self):
        assert tokenize("echo  ${resource_name}\tdone") == ["echo", "${resource_name}", "done"]

    def test_quoted_argument_is_one_token_without_quotes(self):
        assert tokenize('code --goto "${resource_path}" -n') == [
            "code",
            "--goto",
            "${resource_path}",
            "-n",
        ]

    def test_quotes_glue_to_adjacent_text(self):
        assert tokenize('gnome-terminal --working-directory="/home/my user"') == [
            "gnome-terminal",
            "--working-directory=/home/my user",
        ]

    def test_empty_quoted_argument_is_kept(self):
        assert tokenize('cmd /c start "" notepad') == ["cmd", "/c", "start", "", "notepad"]

    def test_unterminated_quote_runs_to_end(self):
        assert tokenize('open -a "Visual Studio Code') == ["open", "-a", "Visual Studio Code"]

    def test_leading_and_trailing_whitespace(self):
        assert tokenize("  ls -la  ") == ["ls", "-la"]

    @pytest.mark.parametrize("command", ["", "   ", "\t\n"])
    def test_blank_command_has_no_tokens(self, command):
        assert tokenize(command) == []


@pytest.mark.unit
class TestJoinTokens:
    """Tests for join_tokens() and the tokenize round trip."""

    def test_quotes_tokens_with_whitespace(self):
        assert join_tokens(["open", "/tmp/a b"]) == 'open "/tmp/a b"'

    def test_quotes_empty_tokens(self):
        assert join_tokens(["start", "", "x"]) == 'start "" x'

    @pytest.mark.parametrize(
        "command",
        [
            "echo hello world",
            'code --goto "/home/me/my file.py"',
            'cmd /c start "" "C:\\Users\\me\\a b.txt"',
            'xterm -e "less +F" /var/log/syslog',
            '"/opt/My App/run"',
            "gedit",
        ],
    )
    def test_round_trip_is_equivalent(self, command):
        tokens = tokenize(command)
        assert tokenize(join_tokens(tokens)) == tokens
