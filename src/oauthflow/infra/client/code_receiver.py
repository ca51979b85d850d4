import logging
import re
import sys
import urllib.parse
import webbrowser

from typing import (
    Callable,
    TextIO
)

from oauthflow.domain.errors import InvalidRedirectError

logger = logging.getLogger(__name__)

CODE_PATTERN = re.compile(r"(?:^|[?&#])code=([^&#\s]+)")

# Authorization URL in, one-time authorization code out.
CodeReceiver = Callable[[str], str]


def extract_code(redirect: str) -> str:
    match = CODE_PATTERN.search(redirect.strip())

    if not match:
        raise InvalidRedirectError(redirect)

    return urllib.parse.unquote(match.group(1))


class ConsoleCodeReceiver:
    """Asks the user to visit the authorization URL and paste back the redirect.

    The browser is opened on a best-effort basis; the pasted line must carry a
    ``code`` query parameter.
    """

    def __init__(
        self,
        category     : str = "oauth",
        open_browser : bool = True,
        input_stream : TextIO | None = None,
        output_stream: TextIO | None = None,
        browser_open : Callable[[str], bool] = webbrowser.open
    ):
        self.__category      = category
        self.__open_browser  = open_browser
        self.__input_stream  = input_stream
        self.__output_stream = output_stream
        self.__browser_open  = browser_open

    def __call__(self, url: str) -> str:
        output = self.__output_stream or sys.stdout

        print(f"[{self.__category}] Visit this URL, allow access, and paste the new URL:\n{url}", file=output, flush=True)

        if self.__open_browser:
            self.__launch_browser(url)

        line = (self.__input_stream or sys.stdin).readline()

        if not line:
            raise InvalidRedirectError(line)

        return extract_code(line)

    def __launch_browser(self, url: str) -> None:
        try:
            self.__browser_open(url)
        except Exception as e:
            logger.debug("[%s] Could not open a browser: %s", self.__category, e)
