# Tests for infra/client/code_receiver.py

import io
import webbrowser

import pytest

from oauthflow.domain.errors import InvalidRedirectError
from oauthflow.infra.client.code_receiver import (
    ConsoleCodeReceiver,
    extract_code
)


class TestExtractCode:
    def test_code_between_other_params(self):
        assert extract_code("https://host/cb?state=x&code=ABC123&foo=bar") == "ABC123"

    def test_code_as_last_param(self):
        assert extract_code("https://host/cb?code=XYZ\n") == "XYZ"

    def test_bare_query_string(self):
        assert extract_code("code=only") == "only"

    def test_percent_encoded_code_is_decoded(self):
        assert extract_code("https://host/cb?code=4%2F0AbC&scope=email") == "4/0AbC"

    def test_similar_param_name_is_not_a_code(self):
        with pytest.raises(InvalidRedirectError):
            extract_code("https://host/cb?error_code=denied")

    def test_missing_code(self):
        with pytest.raises(InvalidRedirectError) as exc_info:
            extract_code("https://host/cb?error=access_denied")

        assert exc_info.value.redirect == "https://host/cb?error=access_denied"
        assert "access_denied" in str(exc_info.value)

    def test_bare_code_without_param_is_rejected(self):
        with pytest.raises(InvalidRedirectError):
            extract_code("ABC123")


class TestConsoleCodeReceiver:
    def test_prints_url_and_reads_pasted_redirect(self):
        opened = []
        output = io.StringIO()

        receiver = ConsoleCodeReceiver(
            "test",
            input_stream=io.StringIO("https://host/cb?code=ABC123&state=s\n"),
            output_stream=output,
            browser_open=opened.append,
        )

        assert receiver("https://auth.example.com/authorize?x=1") == "ABC123"
        assert "https://auth.example.com/authorize?x=1" in output.getvalue()
        assert opened == ["https://auth.example.com/authorize?x=1"]

    def test_browser_disabled(self):
        opened = []

        receiver = ConsoleCodeReceiver(
            open_browser=False,
            input_stream=io.StringIO("?code=C\n"),
            output_stream=io.StringIO(),
            browser_open=opened.append,
        )

        assert receiver("https://auth") == "C"
        assert opened == []

    def test_browser_failure_is_ignored(self):
        def broken(url):
            raise webbrowser.Error("no browser")

        receiver = ConsoleCodeReceiver(
            input_stream=io.StringIO("?code=C\n"),
            output_stream=io.StringIO(),
            browser_open=broken,
        )

        assert receiver("https://auth") == "C"

    def test_launcher_os_error_is_ignored(self):
        def no_display(url):
            raise OSError("no display")

        receiver = ConsoleCodeReceiver(
            input_stream=io.StringIO("?code=C\n"),
            output_stream=io.StringIO(),
            browser_open=no_display,
        )

        assert receiver("https://auth") == "C"

    def test_end_of_input(self):
        receiver = ConsoleCodeReceiver(
            open_browser=False,
            input_stream=io.StringIO(""),
            output_stream=io.StringIO(),
        )

        with pytest.raises(InvalidRedirectError):
            receiver("https://auth")

    def test_reads_stdin_by_default(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("https://host/cb?code=FROMSTDIN\n"))

        receiver = ConsoleCodeReceiver(open_browser=False)

        assert receiver("https://auth.example.com/authorize") == "FROMSTDIN"
        assert "https://auth.example.com/authorize" in capsys.readouterr().out
