import argparse
import httpx
import json
import logging
import sys

from pydantic import ValidationError

from oauthflow.domain.errors import OAuthError
from oauthflow.utils.provider import (
    get_auth_service,
    get_settings
)

logger = logging.getLogger("oauthflow")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="oauthflow",
        description="Obtain and refresh OAuth 2.0 access tokens (authorization code grant)."
    )

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("login", help="Authorize and store a new token if none is stored")
    sub.add_parser("token", help="Print a valid access token, refreshing it if needed")
    sub.add_parser("status", help="Show the stored token state")
    sub.add_parser("logout", help="Clear the stored token")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    service = None

    try:
        logging.getLogger().setLevel(get_settings().LOG_LEVEL.upper())

        service = get_auth_service()

        if args.command == "login":
            print("Authorized." if service.login() else "Already authorized.")
        elif args.command == "token":
            print(service.access_token())
        elif args.command == "status":
            print(json.dumps(service.status(), indent=2))
        elif args.command == "logout":
            service.logout()
    except (OAuthError, httpx.HTTPError, ValidationError) as e:
        logger.error("%s failed: %s", args.command, e)

        return 1
    finally:
        if service is not None:
            service.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
